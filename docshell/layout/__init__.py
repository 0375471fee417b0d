from .model import (
    DEFAULT_GROUP_ID,
    DIRECTIONS,
    Direction,
    Group,
    LayoutError,
    LayoutNode,
    Split,
    default_root,
    new_group_id,
    new_split_id,
    validate_node,
)
from .tree import (
    WeightPolicy,
    close_group,
    close_group_with_removed,
    close_tab,
    find_group,
    find_groups,
    find_split,
    open_tab,
    replace_tree,
    resize_split,
    split_group,
    switch_tab,
    toggle_read_only,
    update_group,
)
from .view_state import DEFAULT_VIEW_STATE, ViewState, ViewStateStore
from .serialization import WorkspaceSnapshot, restore_snapshot, snapshot_to_dict

__all__ = [
    "DEFAULT_GROUP_ID",
    "DIRECTIONS",
    "Direction",
    "Group",
    "LayoutError",
    "LayoutNode",
    "Split",
    "default_root",
    "new_group_id",
    "new_split_id",
    "validate_node",
    "WeightPolicy",
    "close_group",
    "close_group_with_removed",
    "close_tab",
    "find_group",
    "find_groups",
    "find_split",
    "open_tab",
    "replace_tree",
    "resize_split",
    "split_group",
    "switch_tab",
    "toggle_read_only",
    "update_group",
    "DEFAULT_VIEW_STATE",
    "ViewState",
    "ViewStateStore",
    "WorkspaceSnapshot",
    "restore_snapshot",
    "snapshot_to_dict",
]
