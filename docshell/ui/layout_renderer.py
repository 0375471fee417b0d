"""Turns a layout tree into nested QSplitters."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QSizePolicy, QSplitter, QVBoxLayout, QWidget

from docshell.layout.model import Group, LayoutNode, Split
from docshell.layout.render import (
    MIN_PANE_PERCENT,
    build_render_plan,
    node_at_path,
    normalized_percentages,
    resize_pair,
)

GroupFactory = Callable[[Group, int], QWidget]

# QSplitter distributes these proportionally before the first layout pass.
_SIZE_SCALE = 1000


def _scaled(percentages: list[float]) -> list[int]:
    return [max(1, int(round(p * _SIZE_SCALE))) for p in percentages]


class LayoutRenderer(QWidget):
    sizesChanged = Signal(str, list)  # split_id, percentages

    def __init__(
            self,
            group_factory: GroupFactory,
            *,
            handle_width: int = 6,
            min_pane_percent: float = MIN_PANE_PERCENT,
            parent=None,
    ):
        super().__init__(parent)
        self.setContentsMargins(0, 0, 0, 0)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self._group_factory = group_factory
        self._handle_width = int(handle_width)
        self._min_pane_percent = float(min_pane_percent)
        self._splitters: dict[str, QSplitter] = {}
        self._group_widgets: dict[str, QWidget] = {}
        self._root_widget: QWidget | None = None
        self._tree: LayoutNode | None = None

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)

    @property
    def tree(self) -> LayoutNode | None:
        return self._tree

    def splitter_for(self, split_id: str) -> QSplitter | None:
        return self._splitters.get(split_id)

    def group_widget(self, group_id: str) -> QWidget | None:
        return self._group_widgets.get(group_id)

    def group_widgets(self) -> dict[str, QWidget]:
        return dict(self._group_widgets)

    def render(self, tree: LayoutNode) -> None:
        if tree is self._tree and self._root_widget is not None:
            return
        if self._tree is not None and self._root_widget is not None and _shape(tree) == _shape(self._tree):
            # Only weights moved; keep the widgets so a drag in progress survives.
            self._tree = tree
            self._apply_sizes(tree)
            return
        self._clear()
        self._tree = tree
        group_indexes = {
            item.node.id: item.group_index for item in build_render_plan(tree) if item.group_index is not None
        }
        self._root_widget = self._build(tree, (), group_indexes)
        self.layout().addWidget(self._root_widget)

    def rebuild(self, tree: LayoutNode) -> None:
        """Build every widget again, e.g. after view state changed."""
        self._tree = None
        self.render(tree)

    def _clear(self) -> None:
        lay = self.layout()
        while lay.count():
            item = lay.takeAt(0)
            w = item.widget()
            if w is not None:
                w.setParent(None)
                w.deleteLater()
        self._splitters.clear()
        self._group_widgets.clear()
        self._root_widget = None

    def _build(self, node: LayoutNode, path: tuple[int, ...], group_indexes: dict[str, int]) -> QWidget:
        if isinstance(node, Group):
            widget = self._group_factory(node, group_indexes[node.id])
            self._group_widgets[node.id] = widget
            return widget

        orientation = Qt.Horizontal if node.direction == "horizontal" else Qt.Vertical
        splitter = QSplitter(orientation)
        splitter.setObjectName(node.id)
        splitter.setChildrenCollapsible(False)
        splitter.setHandleWidth(self._handle_width)
        for index, child in enumerate(node.children):
            splitter.addWidget(self._build(child, path + (index,), group_indexes))
        splitter.setSizes(_scaled(normalized_percentages(node.sizes)))
        splitter.splitterMoved.connect(
            lambda _pos, index, s=splitter, p=path: self._on_splitter_moved(s, p, index)
        )
        self._splitters[node.id] = splitter
        return splitter

    def _apply_sizes(self, node: LayoutNode) -> None:
        if not isinstance(node, Split):
            return
        splitter = self._splitters.get(node.id)
        if splitter is not None:
            current = normalized_percentages(splitter.sizes())
            wanted = normalized_percentages(node.sizes)
            if any(abs(a - b) > 0.5 for a, b in zip(current, wanted)):
                splitter.setSizes(_scaled(wanted))
        for child in node.children:
            self._apply_sizes(child)

    def _on_splitter_moved(self, splitter: QSplitter, path: tuple[int, ...], index: int) -> None:
        node = node_at_path(self._tree, path) if self._tree is not None else None
        if not isinstance(node, Split):
            return
        pixels = splitter.sizes()
        if len(pixels) != len(node.children) or sum(pixels) <= 0 or not 0 < index < len(pixels):
            return
        dragged = normalized_percentages(pixels)
        handle_at = sum(dragged[:index])
        clamped = resize_pair(dragged, index, handle_at, self._min_pane_percent)
        if any(abs(a - b) > 0.01 for a, b in zip(dragged, clamped)):
            splitter.setSizes(_scaled(clamped))
        self.sizesChanged.emit(node.id, clamped)


def _shape(node: LayoutNode) -> tuple:
    if isinstance(node, Group):
        return ("group", node.id, node.tabs, node.active_path, node.is_read_only)
    return ("split", node.id, node.direction, tuple(_shape(child) for child in node.children))
