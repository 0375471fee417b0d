"""Geometry for drawing a layout tree.

Weights in a split are relative; everything here turns them into
percentages of the parent and back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from docshell.layout.model import Group, LayoutNode, Split

MIN_PANE_PERCENT = 10.0


def normalized_percentages(sizes: Sequence[float]) -> list[float]:
    count = len(sizes)
    if count == 0:
        return []
    total = float(sum(sizes))
    if total <= 0:
        return [100.0 / count] * count
    return [float(size) / total * 100.0 for size in sizes]


@dataclass(frozen=True)
class RenderItem:
    node: LayoutNode
    path: tuple[int, ...]
    depth: int
    percent: float
    group_index: int | None = None
    parent_direction: str | None = None


def build_render_plan(tree: LayoutNode) -> list[RenderItem]:
    """Flatten the tree in drawing order.

    Groups get ``group_index`` in the same order ``find_groups`` lists them,
    which is how tab bars and the status bar number the panes.
    """
    items: list[RenderItem] = []
    counter = 0

    def _walk(node: LayoutNode, path: tuple[int, ...], percent: float, parent_direction: str | None) -> None:
        nonlocal counter
        if isinstance(node, Group):
            items.append(RenderItem(node, path, len(path), percent, counter, parent_direction))
            counter += 1
            return
        items.append(RenderItem(node, path, len(path), percent, None, parent_direction))
        for index, (child, child_percent) in enumerate(zip(node.children, normalized_percentages(node.sizes))):
            _walk(child, path + (index,), child_percent, node.direction)

    _walk(tree, (), 100.0, None)
    return items


def node_at_path(tree: LayoutNode, path: Sequence[int]) -> LayoutNode | None:
    node = tree
    for index in path:
        if not isinstance(node, Split) or not 0 <= index < len(node.children):
            return None
        node = node.children[index]
    return node


def handle_bounds(sizes: Sequence[float], index: int, min_percent: float = MIN_PANE_PERCENT) -> tuple[float, float]:
    """Allowed positions, in percent, of the handle before child ``index``.

    Only the two panes on either side of the handle trade space.
    """
    if not 0 < index < len(sizes):
        raise IndexError(f"No resize handle before child {index}.")
    percents = normalized_percentages(sizes)
    pre_sum = sum(percents[: index - 1])
    pair_sum = percents[index - 1] + percents[index]
    low = pre_sum + min_percent
    high = pre_sum + pair_sum - min_percent
    if low > high:
        middle = pre_sum + pair_sum / 2
        return middle, middle
    return low, high


def resize_pair(
        sizes: Sequence[float],
        index: int,
        position: float,
        min_percent: float = MIN_PANE_PERCENT,
) -> list[float]:
    """New percentages after dropping the handle before child ``index`` at ``position``."""
    low, high = handle_bounds(sizes, index, min_percent)
    position = max(low, min(high, float(position)))
    percents = normalized_percentages(sizes)
    pre_sum = sum(percents[: index - 1])
    pair_sum = percents[index - 1] + percents[index]
    left = position - pre_sum
    percents[index - 1] = left
    percents[index] = pair_sum - left
    return percents
