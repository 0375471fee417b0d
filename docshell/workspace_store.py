"""Per-workspace layout snapshots and the recent-workspaces list."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable

from docshell.layout.model import Group
from docshell.layout.serialization import (
    WorkspaceSnapshot,
    default_snapshot,
    restore_snapshot,
    snapshot_to_dict,
)
from docshell.layout.tree import find_groups
from docshell.log import get_logger
from docshell.services.document_store import DocumentStore
from docshell.settings_store import JsonSettingsStore

logger = get_logger(__name__)

STATE_SECTION = "workspace_state"
LAST_OPENED_KEY = "last_opened"
RECENT_KEY = "recent"
DEFAULT_RECENT_LIMIT = 20


def _default_workspace_data() -> dict[str, Any]:
    return {STATE_SECTION: {}, LAST_OPENED_KEY: None, RECENT_KEY: []}


def _workspace_name(path: str) -> str:
    return Path(path).name or path


def _opened_at(entry: dict[str, Any]) -> float:
    value = entry.get("lastOpened")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        return 0.0
    return float(value)


class WorkspaceStateStore:
    def __init__(
            self,
            path: Path,
            *,
            recent_limit: int = DEFAULT_RECENT_LIMIT,
            persistent: bool = True,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = JsonSettingsStore(path, _default_workspace_data(), persistent=persistent)
        self.recent_limit = max(1, int(recent_limit))
        self._clock = clock

    def load(self) -> None:
        self.store.load()

    def save(self) -> None:
        self.store.save_if_dirty()

    # -------- layout snapshots --------

    def save_state(self, root: str, snapshot: WorkspaceSnapshot) -> None:
        self.store.set_entry(STATE_SECTION, root, snapshot_to_dict(snapshot))
        self.store.set(LAST_OPENED_KEY, root)

    def load_state(self, root: str) -> WorkspaceSnapshot:
        raw = self.store.entry(STATE_SECTION, root)
        if raw is None:
            return default_snapshot()
        return restore_snapshot(raw)

    def has_state(self, root: str) -> bool:
        return self.store.entry(STATE_SECTION, root) is not None

    def forget_state(self, root: str) -> bool:
        return self.store.delete_entry(STATE_SECTION, root)

    @property
    def last_opened(self) -> str | None:
        value = self.store.get(LAST_OPENED_KEY)
        return value if isinstance(value, str) and value else None

    def forget_last_opened(self) -> None:
        self.store.set(LAST_OPENED_KEY, None)

    # -------- recent workspaces --------

    def recent_workspaces(self) -> list[dict[str, Any]]:
        raw = self.store.get(RECENT_KEY)
        if not isinstance(raw, list):
            return []
        return [dict(item) for item in raw if isinstance(item, dict) and isinstance(item.get("path"), str)]

    def _store_recent(self, entries: list[dict[str, Any]]) -> None:
        entries.sort(key=lambda item: (not item.get("pinned", False), -_opened_at(item)))
        self.store.set(RECENT_KEY, entries[: self.recent_limit])

    def touch_workspace(self, root: str) -> dict[str, Any]:
        """Record ``root`` as just opened, keeping its pinned/active flags."""
        entries = self.recent_workspaces()
        existing = next((item for item in entries if item["path"] == root), {})
        entry = {
            "path": root,
            "name": _workspace_name(root),
            "lastOpened": int(self._clock() * 1000),
            "pinned": bool(existing.get("pinned", False)),
            "active": bool(existing.get("active", False)),
        }
        self._store_recent([entry] + [item for item in entries if item["path"] != root])
        return entry

    def set_pinned(self, root: str, pinned: bool) -> bool:
        entries = self.recent_workspaces()
        for item in entries:
            if item["path"] == root:
                item["pinned"] = bool(pinned)
                self._store_recent(entries)
                return True
        return False

    def remove_workspace(self, root: str) -> bool:
        entries = self.recent_workspaces()
        kept = [item for item in entries if item["path"] != root]
        if len(kept) == len(entries):
            return False
        self._store_recent(kept)
        self.forget_state(root)
        if self.last_opened == root:
            self.forget_last_opened()
        return True


def restore_documents(snapshot: WorkspaceSnapshot, documents: DocumentStore) -> list[str]:
    """Load every tab of a restored layout; returns the paths that failed."""
    failed: list[str] = []
    seen: set[str] = set()
    for group in find_groups(snapshot.layout):
        for path in _group_paths(group):
            if path in seen:
                continue
            seen.add(path)
            if not documents.ensure_document_loaded(path):
                failed.append(path)
    if failed:
        logger.warning("%d restored tab(s) could not be loaded", len(failed))
    return failed


def _group_paths(group: Group) -> list[str]:
    paths = list(group.tabs)
    if group.active_path and group.active_path not in paths:
        paths.insert(0, group.active_path)
    return paths
