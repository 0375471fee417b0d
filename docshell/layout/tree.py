"""Pure operations over the layout tree.

Every function takes the current tree and returns the next one. Nothing is
mutated in place, and an operation that finds nothing to do hands back the
very same tree object, so callers detect "no change" with ``is``.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Callable, Iterable, Sequence

from docshell.layout.model import (
    DIRECTIONS,
    Direction,
    Group,
    LayoutNode,
    Split,
    is_weight,
    iter_nodes,
    new_split_id,
)
from docshell.log import get_logger

logger = get_logger(__name__)

GroupUpdater = Callable[[Group], Group]


class WeightPolicy(Enum):
    """Where the weight of a closed pane goes."""

    LAST = "last"
    NEIGHBOR = "neighbor"
    PROPORTIONAL = "proportional"

    @classmethod
    def parse(cls, value: object, default: "WeightPolicy | None" = None) -> "WeightPolicy":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for policy in cls:
            if policy.value == text:
                return policy
        return default if default is not None else cls.LAST


# -------- group registry --------

def find_groups(tree: LayoutNode) -> list[Group]:
    """All groups, depth-first and left-to-right.

    The order is stable for a given tree; "first available group" and tab
    scope lists are derived from it.
    """
    return [node for node in iter_nodes(tree) if isinstance(node, Group)]


def find_group(tree: LayoutNode, group_id: str) -> Group | None:
    for node in iter_nodes(tree):
        if isinstance(node, Group) and node.id == group_id:
            return node
    return None


def find_split(tree: LayoutNode, split_id: str) -> Split | None:
    for node in iter_nodes(tree):
        if isinstance(node, Split) and node.id == split_id:
            return node
    return None


def contains_group(tree: LayoutNode, group_id: str) -> bool:
    return find_group(tree, group_id) is not None


def first_group(tree: LayoutNode) -> Group:
    node = tree
    while isinstance(node, Split):
        node = node.children[0]
    return node


def _node_ids(tree: LayoutNode) -> set[str]:
    return {node.id for node in iter_nodes(tree)}


# -------- group updates --------

def _rebuild_children(node: Split, children: Sequence[LayoutNode]) -> Split:
    if all(new is old for new, old in zip(children, node.children)):
        return node
    return replace(node, children=tuple(children))


def update_group(tree: LayoutNode, group_id: str, updater: GroupUpdater) -> LayoutNode:
    """Apply ``updater`` to the group with ``group_id``.

    Ancestors on the path are rebuilt; all other subtrees are shared.
    """
    if isinstance(tree, Group):
        if tree.id != group_id:
            return tree
        return updater(tree)
    return _rebuild_children(tree, [update_group(child, group_id, updater) for child in tree.children])


def open_tab(tree: LayoutNode, group_id: str, path: str) -> LayoutNode:
    def _open(group: Group) -> Group:
        tabs = group.tabs if path in group.tabs else group.tabs + (path,)
        if tabs is group.tabs and group.active_path == path:
            return group
        return replace(group, tabs=tabs, active_path=path)

    return update_group(tree, group_id, _open)


def close_tab(tree: LayoutNode, group_id: str, path: str) -> LayoutNode:
    def _close(group: Group) -> Group:
        if path not in group.tabs:
            return group
        tabs = tuple(tab for tab in group.tabs if tab != path)
        active = group.active_path
        if active == path:
            # Last remaining tab, not most-recently-used.
            active = tabs[-1] if tabs else None
        return replace(group, tabs=tabs, active_path=active)

    return update_group(tree, group_id, _close)


def switch_tab(tree: LayoutNode, group_id: str, path: str) -> LayoutNode:
    """Make ``path`` the active tab; it must already be open in the group."""

    def _switch(group: Group) -> Group:
        if path not in group.tabs:
            logger.debug("switch_tab ignored: '%s' is not open in group %s", path, group_id)
            return group
        if group.active_path == path:
            return group
        return replace(group, active_path=path)

    return update_group(tree, group_id, _switch)


def toggle_read_only(tree: LayoutNode, group_id: str) -> LayoutNode:
    return update_group(tree, group_id, lambda g: replace(g, is_read_only=not g.is_read_only))


# -------- split --------

def _clone_group(source: Group, new_group_id: str) -> Group:
    return Group(
        id=new_group_id,
        tabs=source.tabs,
        active_path=source.active_path,
        is_read_only=source.is_read_only,
    )


def _split_in(
        node: LayoutNode,
        source_group_id: str,
        direction: Direction,
        new_group_id: str,
        split_id: str | None,
) -> LayoutNode:
    if isinstance(node, Group):
        if node.id != source_group_id:
            return node
        return Split(
            id=split_id or new_split_id(),
            direction=direction,
            children=(node, _clone_group(node, new_group_id)),
            sizes=(0.5, 0.5),
        )

    if node.direction == direction:
        for index, child in enumerate(node.children):
            if isinstance(child, Group) and child.id == source_group_id:
                half = node.sizes[index] / 2
                children = node.children[: index + 1] + (_clone_group(child, new_group_id),) + node.children[index + 1:]
                sizes = node.sizes[:index] + (half, half) + node.sizes[index + 1:]
                return replace(node, children=children, sizes=sizes)

    return _rebuild_children(
        node,
        [_split_in(child, source_group_id, direction, new_group_id, split_id) for child in node.children],
    )


def split_group(
        tree: LayoutNode,
        source_group_id: str,
        direction: Direction,
        new_group_id: str,
        *,
        split_id: str | None = None,
) -> LayoutNode:
    """Open a second view of ``source_group_id`` beside it.

    The new group copies the source's tabs, active tab and read-only flag.
    Inside a split that already runs in ``direction`` the new group becomes a
    sibling right after the source and takes half of its weight; otherwise
    the source is wrapped in a new two-child split with equal weights.
    """
    if direction not in DIRECTIONS:
        logger.debug("split_group ignored: unknown direction %r", direction)
        return tree
    ids = _node_ids(tree)
    if source_group_id not in ids:
        return tree
    if new_group_id in ids or (split_id is not None and split_id in ids):
        logger.debug("split_group ignored: id %s already in use", new_group_id)
        return tree
    return _split_in(tree, source_group_id, direction, new_group_id, split_id)


# -------- close --------

def _redistribute(
        sizes: list[float],
        kept_from: list[int],
        freed: list[tuple[int, float]],
        policy: WeightPolicy,
) -> list[float]:
    """Hand freed weight back to the survivors.

    ``kept_from[i]`` is the original index of survivor ``i``; ``freed`` holds
    ``(original_index, weight)`` for every removed child.
    """
    total_freed = sum(weight for _, weight in freed)
    if total_freed <= 0:
        return sizes

    if policy is WeightPolicy.PROPORTIONAL:
        kept_total = sum(sizes)
        if kept_total > 0:
            scale = (kept_total + total_freed) / kept_total
            return [size * scale for size in sizes]
        policy = WeightPolicy.LAST

    if policy is WeightPolicy.NEIGHBOR:
        for original_index, weight in freed:
            before = [i for i, orig in enumerate(kept_from) if orig < original_index]
            target = before[-1] if before else 0
            sizes[target] += weight
        return sizes

    sizes[-1] += total_freed
    return sizes


def _close_in(node: LayoutNode, group_id: str, policy: WeightPolicy) -> LayoutNode | None:
    if isinstance(node, Group):
        return None if node.id == group_id else node

    children: list[LayoutNode] = []
    sizes: list[float] = []
    kept_from: list[int] = []
    freed: list[tuple[int, float]] = []
    changed = False
    for index, child in enumerate(node.children):
        result = _close_in(child, group_id, policy)
        if result is None:
            freed.append((index, node.sizes[index]))
            changed = True
            continue
        if result is not child:
            changed = True
        children.append(result)
        sizes.append(node.sizes[index])
        kept_from.append(index)

    if not changed:
        return node
    if not children:
        return None
    if len(children) == 1:
        return children[0]
    sizes = _redistribute(sizes, kept_from, freed, policy)
    return replace(node, children=tuple(children), sizes=tuple(sizes))


def close_group(
        tree: LayoutNode,
        group_id: str,
        *,
        policy: WeightPolicy = WeightPolicy.LAST,
) -> LayoutNode:
    """Remove a group leaf, collapsing splits left with fewer than two children.

    The root group of a single-pane layout cannot be closed; the tree always
    keeps at least one group.
    """
    if isinstance(tree, Group):
        return tree
    result = _close_in(tree, group_id, policy)
    if result is None:
        return tree
    return result


def close_group_with_removed(
        tree: LayoutNode,
        group_id: str,
        *,
        policy: WeightPolicy = WeightPolicy.LAST,
) -> tuple[LayoutNode, list[str]]:
    """Like ``close_group`` but also report the ids of the groups that went away."""
    result = close_group(tree, group_id, policy=policy)
    if result is tree:
        return tree, []
    remaining = {group.id for group in find_groups(result)}
    removed = [group.id for group in find_groups(tree) if group.id not in remaining]
    return result, removed


# -------- resize / replace --------

def _valid_sizes(new_sizes: Iterable[object]) -> tuple[float, ...] | None:
    sizes = list(new_sizes)
    if not all(is_weight(value) for value in sizes):
        return None
    return tuple(float(value) for value in sizes)


def resize_split(tree: LayoutNode, split_id: str, new_sizes: Sequence[float]) -> LayoutNode:
    """Replace the weights of one split.

    Weights that do not line up with the split's children, or that are not
    positive finite numbers, are rejected and the tree is returned unchanged.
    """
    if isinstance(tree, Group):
        return tree
    if tree.id == split_id:
        sizes = _valid_sizes(new_sizes)
        if sizes is None or len(sizes) != len(tree.children):
            logger.debug("resize_split ignored: %r does not fit split %s", list(new_sizes), split_id)
            return tree
        if sizes == tree.sizes:
            return tree
        return replace(tree, sizes=sizes)
    return _rebuild_children(tree, [resize_split(child, split_id, new_sizes) for child in tree.children])


def replace_tree(new_tree: LayoutNode) -> LayoutNode:
    return new_tree
