"""Layout tree node types.

The editor area is a tree: ``Split`` nodes divide space between two or more
children along one axis, ``Group`` leaves hold the open tabs of one pane.
Nodes are immutable; every change produces a new tree that shares the
untouched subtrees with the old one.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from numbers import Real
from typing import Iterator, Literal, Union

Direction = Literal["horizontal", "vertical"]
DIRECTIONS: tuple[str, ...] = ("horizontal", "vertical")

DEFAULT_GROUP_ID = "1"


class LayoutError(ValueError):
    """Raised when layout data breaks a structural invariant."""


@dataclass(frozen=True)
class Group:
    id: str
    tabs: tuple[str, ...] = ()
    active_path: str | None = None
    is_read_only: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.tabs, tuple):
            object.__setattr__(self, "tabs", tuple(self.tabs))

    @property
    def type(self) -> str:
        return "group"


@dataclass(frozen=True)
class Split:
    id: str
    direction: Direction
    children: tuple["LayoutNode", ...] = field(default_factory=tuple)
    sizes: tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if not isinstance(self.sizes, tuple):
            object.__setattr__(self, "sizes", tuple(self.sizes))

    @property
    def type(self) -> str:
        return "split"


LayoutNode = Union[Group, Split]


def default_root() -> Group:
    return Group(id=DEFAULT_GROUP_ID)


def new_split_id() -> str:
    return f"split-{uuid.uuid4().hex[:12]}"


def new_group_id() -> str:
    return f"group-{uuid.uuid4().hex[:12]}"


def iter_nodes(tree: LayoutNode) -> Iterator[LayoutNode]:
    """Pre-order, left-to-right walk over every node of ``tree``."""
    stack: list[LayoutNode] = [tree]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Split):
            stack.extend(reversed(node.children))


def is_weight(value: object) -> bool:
    """Positive, finite, real and not a bool."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return value > 0 and value == value and value != float("inf")


def validate_node(tree: LayoutNode) -> LayoutNode:
    """Check every structural invariant of ``tree`` and return it unchanged.

    Raises ``LayoutError`` naming the first offending node.
    """
    seen: set[str] = set()
    for node in iter_nodes(tree):
        if not isinstance(node, (Group, Split)):
            raise LayoutError(f"Unknown layout node {node!r}.")
        if not isinstance(node.id, str) or not node.id:
            raise LayoutError("Layout node ids must be non-empty strings.")
        if node.id in seen:
            raise LayoutError(f"Duplicate layout node id '{node.id}'.")
        seen.add(node.id)

        if isinstance(node, Group):
            if any(not isinstance(tab, str) for tab in node.tabs):
                raise LayoutError(f"Group '{node.id}' has a non-string tab.")
            if len(set(node.tabs)) != len(node.tabs):
                raise LayoutError(f"Group '{node.id}' has duplicate tabs.")
            if node.active_path is not None and node.active_path not in node.tabs:
                raise LayoutError(
                    f"Group '{node.id}' active path '{node.active_path}' is not an open tab."
                )
            continue

        if node.direction not in DIRECTIONS:
            raise LayoutError(f"Split '{node.id}' has unknown direction '{node.direction}'.")
        if len(node.children) < 2:
            raise LayoutError(
                f"Split '{node.id}' has {len(node.children)} children, at least 2 required."
            )
        if len(node.sizes) != len(node.children):
            raise LayoutError(
                f"Split '{node.id}' has {len(node.sizes)} sizes for {len(node.children)} children."
            )
        if not all(is_weight(size) for size in node.sizes):
            raise LayoutError(f"Split '{node.id}' sizes must be positive numbers.")
    return tree
