"""Tests for workspace layout persistence and the recent list."""

import json

import pytest

from docshell.layout.model import Group, Split
from docshell.layout.serialization import WorkspaceSnapshot, default_snapshot
from docshell.services.document_store import FileDocumentStore
from docshell.workspace_store import WorkspaceStateStore, restore_documents


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        self.now += 1.0
        return self.now


@pytest.fixture
def store(tmp_path):
    ws = WorkspaceStateStore(tmp_path / "workspaces.json", clock=FakeClock())
    ws.load()
    return ws


class TestLayoutState:
    def test_unknown_root_gives_default(self, store):
        assert store.load_state("/nowhere") == default_snapshot()
        assert not store.has_state("/nowhere")

    def test_save_and_reload_from_disk(self, tmp_path, store, nested_tree):
        snap = WorkspaceSnapshot(nested_tree, "g2")
        store.save_state("/proj/a.b", snap)
        store.save()

        again = WorkspaceStateStore(tmp_path / "workspaces.json")
        again.load()
        assert again.load_state("/proj/a.b") == snap
        assert again.last_opened == "/proj/a.b"

    def test_corrupt_entry_restores_default(self, tmp_path):
        path = tmp_path / "workspaces.json"
        path.write_text(
            json.dumps({"workspace_state": {"/p": {"layout": {"type": "split"}}}}),
            encoding="utf-8",
        )
        ws = WorkspaceStateStore(path)
        ws.load()
        assert ws.load_state("/p") == default_snapshot()

    def test_legacy_entry_is_migrated(self, tmp_path):
        path = tmp_path / "workspaces.json"
        legacy = {"groups": [{"id": "1", "tabs": ["a.md"], "activePath": "a.md"}], "activeGroupId": "1"}
        path.write_text(json.dumps({"workspace_state": {"/p": legacy}}), encoding="utf-8")
        ws = WorkspaceStateStore(path)
        ws.load()
        assert ws.load_state("/p").layout == Group("1", ("a.md",), "a.md")

    def test_forget_state(self, store):
        store.save_state("/p", default_snapshot())
        assert store.forget_state("/p") is True
        assert store.forget_state("/p") is False


class TestRecentWorkspaces:
    def test_most_recent_first(self, store):
        store.touch_workspace("/a")
        store.touch_workspace("/b")
        store.touch_workspace("/a")

        assert [item["path"] for item in store.recent_workspaces()] == ["/a", "/b"]
        entry = store.recent_workspaces()[0]
        assert entry["name"] == "a"
        assert entry["lastOpened"] == 1003000

    def test_pinned_sorts_first_and_survives_touch(self, store):
        store.touch_workspace("/a")
        store.touch_workspace("/b")
        assert store.set_pinned("/a", True) is True
        store.touch_workspace("/c")

        paths = [item["path"] for item in store.recent_workspaces()]
        assert paths == ["/a", "/c", "/b"]
        store.touch_workspace("/a")
        assert store.recent_workspaces()[0]["pinned"] is True

    def test_set_pinned_unknown(self, store):
        assert store.set_pinned("/missing", True) is False

    def test_limit(self, tmp_path):
        ws = WorkspaceStateStore(tmp_path / "w.json", recent_limit=3, clock=FakeClock())
        ws.load()
        for name in "abcde":
            ws.touch_workspace(f"/{name}")
        assert [item["path"] for item in ws.recent_workspaces()] == ["/e", "/d", "/c"]

    def test_malformed_timestamps_sort_last(self, tmp_path):
        path = tmp_path / "w.json"
        path.write_text(
            json.dumps(
                {
                    "recent": [
                        {"path": "/old", "lastOpened": "yesterday"},
                        {"path": "/b", "lastOpened": 5},
                        {"path": "/n", "lastOpened": None},
                    ]
                }
            ),
            encoding="utf-8",
        )
        ws = WorkspaceStateStore(path, clock=FakeClock())
        ws.load()

        ws.touch_workspace("/c")

        assert [item["path"] for item in ws.recent_workspaces()] == ["/c", "/b", "/old", "/n"]

    def test_remove_workspace_forgets_everything(self, store):
        store.touch_workspace("/a")
        store.save_state("/a", default_snapshot())

        assert store.remove_workspace("/a") is True
        assert store.recent_workspaces() == []
        assert not store.has_state("/a")
        assert store.last_opened is None
        assert store.remove_workspace("/a") is False


class TestRestoreDocuments:
    def test_reports_missing_files(self, tmp_path):
        present = tmp_path / "a.md"
        present.write_text("# a", encoding="utf-8")
        missing = str(tmp_path / "gone.md")
        tree = Split(
            "s",
            "horizontal",
            (Group("1", (str(present),), str(present)), Group("2", (missing, str(present)), missing)),
            (1, 1),
        )
        docs = FileDocumentStore()

        failed = restore_documents(WorkspaceSnapshot(tree, "1"), docs)

        assert failed == [missing]
        assert docs.content(str(present)) == "# a"
