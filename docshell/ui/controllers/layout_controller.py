"""Controller that owns the editor layout tree and per-group view state."""

from __future__ import annotations

from typing import Any, Sequence

from PySide6.QtCore import QObject, Signal

from docshell.layout import tree as layout_tree
from docshell.layout.model import (
    DEFAULT_GROUP_ID,
    Direction,
    Group,
    LayoutNode,
    default_root,
    new_group_id as make_group_id,
)
from docshell.layout.serialization import WorkspaceSnapshot
from docshell.layout.tree import WeightPolicy
from docshell.layout.view_state import ViewState, ViewStateStore
from docshell.log import get_logger
from docshell.services.document_store import DocumentStore

logger = get_logger(__name__)


class EditorLayoutController(QObject):
    layoutChanged = Signal(object)
    activeGroupChanged = Signal(str)

    def __init__(
            self,
            documents: DocumentStore | None = None,
            *,
            weight_policy: WeightPolicy = WeightPolicy.LAST,
            view_states: ViewStateStore | None = None,
            parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._documents = documents
        self._layout: LayoutNode = default_root()
        self._active_group_id = DEFAULT_GROUP_ID
        self.weight_policy = weight_policy
        self.view_states = view_states if view_states is not None else ViewStateStore()

    # -------- state --------

    @property
    def layout(self) -> LayoutNode:
        return self._layout

    @property
    def active_group_id(self) -> str:
        return self._active_group_id

    def groups(self) -> list[Group]:
        return layout_tree.find_groups(self._layout)

    def active_group(self) -> Group:
        return layout_tree.find_group(self._layout, self._active_group_id) or layout_tree.first_group(self._layout)

    def open_paths(self) -> list[str]:
        """Every open document once, in group order; used for reference counting."""
        seen: dict[str, None] = {}
        for group in self.groups():
            for path in group.tabs:
                seen.setdefault(path, None)
        return list(seen)

    def _commit(self, new_layout: LayoutNode) -> bool:
        if new_layout is self._layout:
            return False
        self._layout = new_layout
        self.layoutChanged.emit(new_layout)
        return True

    def set_active_group(self, group_id: str) -> bool:
        if group_id == self._active_group_id:
            return False
        if not layout_tree.contains_group(self._layout, group_id):
            logger.debug("Ignoring activation of unknown group %s", group_id)
            return False
        self._active_group_id = group_id
        self.activeGroupChanged.emit(group_id)
        return True

    # -------- tabs --------

    def open_tab(self, path: str, group_id: str | None = None) -> bool:
        target = group_id or self._active_group_id
        if self._documents is not None and not self._documents.ensure_document_loaded(path):
            return False
        return self._commit(layout_tree.open_tab(self._layout, target, path))

    def close_tab(self, path: str, group_id: str) -> bool:
        return self._commit(layout_tree.close_tab(self._layout, group_id, path))

    def switch_tab(self, group_id: str, path: str) -> bool:
        changed = self._commit(layout_tree.switch_tab(self._layout, group_id, path))
        activated = self.set_active_group(group_id)
        return changed or activated

    def toggle_read_only(self, group_id: str) -> bool:
        return self._commit(layout_tree.toggle_read_only(self._layout, group_id))

    # -------- groups --------

    def split_group(
            self,
            source_group_id: str | None = None,
            direction: Direction = "horizontal",
            new_id: str | None = None,
    ) -> str | None:
        """Split a group and focus the new pane; returns the new group id."""
        source = source_group_id or self._active_group_id
        new_id = new_id or make_group_id()
        new_layout = layout_tree.split_group(self._layout, source, direction, new_id)
        if new_layout is self._layout:
            return None
        # View state must exist before listeners see the new group.
        self.view_states.fork(source, new_id)
        self._commit(new_layout)
        self.set_active_group(new_id)
        return new_id

    def close_group(self, group_id: str) -> list[str]:
        """Close a pane and drop the view state of every group that went away."""
        new_layout, removed = layout_tree.close_group_with_removed(
            self._layout, group_id, policy=self.weight_policy
        )
        if not self._commit(new_layout):
            return []
        for removed_id in removed:
            self.view_states.clear(removed_id)
        if self._active_group_id in removed:
            self.set_active_group(layout_tree.first_group(self._layout).id)
        return removed

    def resize_split(self, split_id: str, sizes: Sequence[float]) -> bool:
        return self._commit(layout_tree.resize_split(self._layout, split_id, sizes))

    def replace_tree(self, new_layout: LayoutNode) -> bool:
        changed = self._commit(layout_tree.replace_tree(new_layout))
        self.view_states.prune(group.id for group in self.groups())
        if not layout_tree.contains_group(self._layout, self._active_group_id):
            self.set_active_group(layout_tree.first_group(self._layout).id)
        return changed

    # -------- view state --------

    def view_state(self, group_id: str | None = None) -> ViewState:
        return self.view_states.get(group_id or self._active_group_id)

    def set_view_state(self, group_id: str, **updates: Any) -> ViewState:
        return self.view_states.set(group_id, updates)

    # -------- persistence --------

    def snapshot(self) -> WorkspaceSnapshot:
        return WorkspaceSnapshot(layout=self._layout, active_group_id=self._active_group_id)

    def restore(self, snapshot: WorkspaceSnapshot) -> None:
        self.replace_tree(snapshot.layout)
        self.set_active_group(snapshot.active_group_id)
