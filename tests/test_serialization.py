"""Tests for layout snapshot (de)serialization and legacy migration."""

import json

import pytest

from docshell.layout.model import Group, LayoutError, Split
from docshell.layout.serialization import (
    WorkspaceSnapshot,
    default_snapshot,
    dumps_snapshot,
    loads_snapshot,
    node_from_dict,
    node_to_dict,
    restore_snapshot,
    snapshot_from_dict,
    snapshot_to_dict,
)


class TestNodeDicts:
    def test_group_shape(self):
        data = node_to_dict(Group("1", ("a.md",), "a.md", True))
        assert data == {
            "id": "1",
            "type": "group",
            "tabs": ["a.md"],
            "activePath": "a.md",
            "isReadOnly": True,
        }

    def test_split_shape(self, nested_tree):
        data = node_to_dict(nested_tree)
        assert data["type"] == "split"
        assert data["direction"] == "horizontal"
        assert data["sizes"] == [0.2, 0.5, 0.3]
        assert [c["id"] for c in data["children"]] == ["g1", "s-inner", "g4"]

    def test_tree_survives_json(self, nested_tree):
        raw = json.loads(json.dumps(node_to_dict(nested_tree)))
        assert node_from_dict(raw) == nested_tree

    def test_split_with_mismatched_sizes_is_rejected(self):
        raw = {
            "id": "s",
            "type": "split",
            "direction": "vertical",
            "children": [{"id": "1", "type": "group", "tabs": []}, {"id": "2", "type": "group", "tabs": []}],
            "sizes": [1],
        }
        with pytest.raises(LayoutError):
            node_from_dict(raw)

    def test_one_child_split_is_rejected(self):
        raw = {
            "id": "s",
            "type": "split",
            "direction": "vertical",
            "children": [{"id": "1", "type": "group", "tabs": []}],
            "sizes": [1],
        }
        with pytest.raises(LayoutError):
            node_from_dict(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            [],
            {"type": "group"},
            {"id": "1", "type": "pane"},
            {"id": "1", "type": "group", "tabs": "a.md"},
            {"id": "1", "type": "group", "tabs": ["a.md"], "activePath": 3},
            {"id": "1", "type": "group", "tabs": [], "isReadOnly": "false"},
            {"id": "1", "type": "group", "tabs": [], "isReadOnly": 1},
            {"id": "s", "type": "split", "direction": "horizontal"},
        ],
    )
    def test_malformed_nodes(self, raw):
        with pytest.raises(LayoutError):
            node_from_dict(raw)


class TestSnapshots:
    def test_snapshot_dict_shape(self, nested_tree):
        data = snapshot_to_dict(WorkspaceSnapshot(nested_tree, "g2"))
        assert data["activeGroupId"] == "g2"
        assert data["layout"]["id"] == "s-root"

    def test_dumps_and_loads(self, nested_tree):
        snap = WorkspaceSnapshot(nested_tree, "g3")
        assert loads_snapshot(dumps_snapshot(snap)) == snap

    def test_unknown_active_group_falls_back_to_first(self, nested_tree):
        snap = snapshot_from_dict({"layout": node_to_dict(nested_tree), "activeGroupId": "gone"})
        assert snap.active_group_id == "g1"

    def test_legacy_groups_use_first_entry_only(self):
        raw = {
            "groups": [
                {"id": "7", "tabs": ["a.md", "b.md"], "activePath": "b.md", "isReadOnly": True},
                {"id": "8", "tabs": ["c.md"], "activePath": "c.md"},
            ],
            "activeGroupId": "8",
        }
        snap = snapshot_from_dict(raw)

        assert snap.layout == Group("7", ("a.md", "b.md"), "b.md", True)
        assert snap.active_group_id == "7"

    def test_legacy_group_defaults(self):
        snap = snapshot_from_dict({"groups": [{"tabs": ["a.md", "a.md"], "activePath": "x.md"}]})
        assert snap.layout == Group("1", ("a.md",), None, False)


class TestRestoreFallback:
    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "{not json",
            "[]",
            {},
            {"groups": []},
            {"layout": {"id": "s", "type": "split", "direction": "vertical", "children": [], "sizes": []}},
        ],
    )
    def test_falls_back_to_default_root(self, raw):
        assert restore_snapshot(raw) == default_snapshot()

    def test_default_snapshot(self):
        snap = default_snapshot()
        assert snap.layout == Group("1", (), None, False)
        assert snap.active_group_id == "1"

    def test_valid_json_text(self):
        tree = Split("s", "vertical", (Group("1"), Group("2")), (1, 3))
        text = json.dumps({"layout": node_to_dict(tree), "activeGroupId": "2"})
        snap = restore_snapshot(text)
        assert snap.layout == tree
        assert snap.active_group_id == "2"

    def test_string_read_only_flag_discards_the_layout(self):
        raw = {"layout": {"id": "1", "type": "group", "tabs": ["a.md"], "isReadOnly": "false"}}
        assert restore_snapshot(raw) == default_snapshot()

    def test_legacy_string_read_only_flag_discards_the_layout(self):
        assert restore_snapshot({"groups": [{"tabs": ["a.md"], "isReadOnly": "false"}]}) == default_snapshot()
