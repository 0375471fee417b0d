"""JSON shape of the layout tree and of the per-workspace snapshot.

Wire format::

    {"layout": <node>, "activeGroupId": "<id>"}

where a node is either
``{"id", "type": "group", "tabs", "activePath", "isReadOnly"}`` or
``{"id", "type": "split", "direction", "children", "sizes"}``.

Older workspaces stored ``{"groups": [...]}``; only the first entry of that
list survives the migration.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from docshell.layout.model import (
    DEFAULT_GROUP_ID,
    Group,
    LayoutError,
    LayoutNode,
    Split,
    default_root,
    validate_node,
)
from docshell.layout.tree import contains_group, first_group
from docshell.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WorkspaceSnapshot:
    layout: LayoutNode = field(default_factory=default_root)
    active_group_id: str = DEFAULT_GROUP_ID


def default_snapshot() -> WorkspaceSnapshot:
    return WorkspaceSnapshot(layout=default_root(), active_group_id=DEFAULT_GROUP_ID)


def node_to_dict(node: LayoutNode) -> dict[str, Any]:
    if isinstance(node, Group):
        return {
            "id": node.id,
            "type": "group",
            "tabs": list(node.tabs),
            "activePath": node.active_path,
            "isReadOnly": node.is_read_only,
        }
    return {
        "id": node.id,
        "type": "split",
        "direction": node.direction,
        "children": [node_to_dict(child) for child in node.children],
        "sizes": list(node.sizes),
    }


def _read_only_flag(raw: Mapping[str, Any], node_id: str) -> bool:
    value = raw.get("isReadOnly")
    if value is None:
        return False
    if not isinstance(value, bool):
        raise LayoutError(f"Group '{node_id}' isReadOnly must be true or false.")
    return value


def _parse_node(raw: Any) -> LayoutNode:
    if not isinstance(raw, Mapping):
        raise LayoutError(f"Layout node must be an object, found {type(raw).__name__}.")
    kind = raw.get("type")
    node_id = raw.get("id")
    if not isinstance(node_id, str):
        raise LayoutError("Layout node is missing a string id.")

    if kind == "group":
        tabs = raw.get("tabs", [])
        if not isinstance(tabs, list):
            raise LayoutError(f"Group '{node_id}' tabs must be a list.")
        active = raw.get("activePath")
        if active is not None and not isinstance(active, str):
            raise LayoutError(f"Group '{node_id}' activePath must be a string or null.")
        return Group(
            id=node_id,
            tabs=tuple(tabs),
            active_path=active,
            is_read_only=_read_only_flag(raw, node_id),
        )

    if kind == "split":
        children = raw.get("children")
        sizes = raw.get("sizes")
        if not isinstance(children, list) or not isinstance(sizes, list):
            raise LayoutError(f"Split '{node_id}' needs children and sizes lists.")
        return Split(
            id=node_id,
            direction=raw.get("direction"),
            children=tuple(_parse_node(child) for child in children),
            sizes=tuple(sizes),
        )

    raise LayoutError(f"Layout node '{node_id}' has unknown type {kind!r}.")


def node_from_dict(raw: Any) -> LayoutNode:
    """Build and validate a tree; malformed data raises ``LayoutError``."""
    return validate_node(_parse_node(raw))


def snapshot_to_dict(snapshot: WorkspaceSnapshot) -> dict[str, Any]:
    return {"layout": node_to_dict(snapshot.layout), "activeGroupId": snapshot.active_group_id}


def _migrate_legacy_groups(groups: Any) -> Group:
    if not isinstance(groups, list) or not groups or not isinstance(groups[0], Mapping):
        raise LayoutError("Legacy layout has no usable group.")
    old = groups[0]
    tabs = old.get("tabs") or []
    if not isinstance(tabs, list):
        raise LayoutError("Legacy group tabs must be a list.")
    # Keep first occurrences only.
    unique_tabs = tuple(dict.fromkeys(str(tab) for tab in tabs))
    active = old.get("activePath") or None
    if active is not None and active not in unique_tabs:
        active = None
    group_id = str(old.get("id") or DEFAULT_GROUP_ID)
    group = Group(
        id=group_id,
        tabs=unique_tabs,
        active_path=active,
        is_read_only=_read_only_flag(old, group_id),
    )
    return validate_node(group)


def snapshot_from_dict(raw: Any) -> WorkspaceSnapshot:
    """Parse either the tree format or the legacy flat-list format.

    Raises ``LayoutError`` when neither can be read.
    """
    if not isinstance(raw, Mapping):
        raise LayoutError(f"Workspace snapshot must be an object, found {type(raw).__name__}.")

    if raw.get("layout") is not None:
        layout = node_from_dict(raw["layout"])
        active = raw.get("activeGroupId")
    elif raw.get("groups") is not None:
        layout = _migrate_legacy_groups(raw["groups"])
        active = layout.id
        logger.info("Migrated legacy group list to layout tree (root group %s)", layout.id)
    else:
        raise LayoutError("Workspace snapshot has neither 'layout' nor 'groups'.")

    if not isinstance(active, str) or not contains_group(layout, active):
        active = first_group(layout).id
    return WorkspaceSnapshot(layout=layout, active_group_id=active)


def restore_snapshot(raw: Any) -> WorkspaceSnapshot:
    """Best-effort restore; anything unreadable yields the single default group."""
    if raw is None:
        return default_snapshot()
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            raw = json.loads(raw)
        return snapshot_from_dict(raw)
    except (LayoutError, ValueError, TypeError, RecursionError) as exc:
        logger.warning("Discarding unreadable workspace layout: %s", exc)
        return default_snapshot()


def dumps_snapshot(snapshot: WorkspaceSnapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot))


def loads_snapshot(text: str) -> WorkspaceSnapshot:
    return restore_snapshot(text)
