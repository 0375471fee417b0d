"""Dictionary-of-JSON store shared by the IDE settings and workspace state."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

from docshell.log import get_logger
from docshell.services.file_io import atomic_write_json, read_json_object

logger = get_logger(__name__)


class SettingsStoreError(RuntimeError):
    """Raised when a settings file cannot be saved."""


def deep_merge_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Fill in missing keys from ``defaults``, recursing into nested dicts."""
    merged = deepcopy(dict(data))
    for key, fallback in defaults.items():
        present = merged.get(key)
        if key not in merged:
            merged[key] = deepcopy(fallback)
        elif isinstance(present, dict) and isinstance(fallback, dict):
            merged[key] = deep_merge_defaults(present, fallback)
    return merged


def _key_parts(key: str) -> list[str]:
    if not key:
        raise ValueError("Key cannot be empty.")
    return key.split(".")


def dot_get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    if not key:
        return data
    node: Any = data
    for part in _key_parts(key):
        if not isinstance(node, Mapping):
            return default
        node = node.get(part, _MISSING)
        if node is _MISSING:
            return default
    return node


def dot_set(data: dict[str, Any], key: str, value: Any) -> None:
    *parents, leaf = _key_parts(key)
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


_MISSING = object()


class JsonSettingsStore:
    """A JSON file loaded into a dict, merged with defaults, saved on demand.

    Plain keys use dotted paths (``layout.weight_policy``). Keys that may
    themselves contain dots, such as folder paths, go through ``entry`` and
    ``set_entry``, which address one level below a named section.
    """

    def __init__(self, path: Path, defaults: Mapping[str, Any], *, persistent: bool = True) -> None:
        self.path = Path(path)
        self.defaults: dict[str, Any] = deepcopy(dict(defaults))
        self.data: dict[str, Any] = {}
        self.dirty = False
        self.last_error: str | None = None
        self.persistent = bool(persistent)

    def load(self) -> dict[str, Any]:
        self.last_error = None
        if not self.persistent:
            self.data = deepcopy(self.defaults)
            self.dirty = False
            return self.data

        if not self.path.exists():
            self.data = deepcopy(self.defaults)
            self.dirty = True
            return self.data

        try:
            loaded = read_json_object(self.path)
        except (OSError, ValueError) as exc:
            # The broken file stays on disk untouched until the next save.
            self.last_error = str(exc)
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            loaded = {}
        self.data = deep_merge_defaults(loaded, self.defaults)
        self.dirty = False
        return self.data

    def save(self) -> None:
        if self.persistent:
            try:
                atomic_write_json(self.path, self.data)
            except OSError as exc:
                raise SettingsStoreError(f"Could not write settings file '{self.path}': {exc}") from exc
            self.last_error = None
        self.dirty = False

    def save_if_dirty(self) -> bool:
        if self.dirty:
            self.save()
            return True
        return False

    def get(self, key: str, default: Any = None) -> Any:
        return dot_get(self.data, key, default)

    def set(self, key: str, value: Any) -> bool:
        if self.get(key, _MISSING) == value:
            return False
        dot_set(self.data, key, value)
        self.dirty = True
        return True

    # -------- section entries --------

    def _section(self, section: str, *, create: bool = False) -> dict[str, Any] | None:
        bucket = self.data.get(section)
        if isinstance(bucket, dict):
            return bucket
        if not create:
            return None
        bucket = self.data[section] = {}
        return bucket

    def entry(self, section: str, key: str, default: Any = None) -> Any:
        bucket = self._section(section)
        return default if bucket is None else bucket.get(key, default)

    def set_entry(self, section: str, key: str, value: Any) -> bool:
        bucket = self._section(section, create=True)
        if bucket.get(key, _MISSING) == value:
            return False
        bucket[key] = value
        self.dirty = True
        return True

    def delete_entry(self, section: str, key: str) -> bool:
        bucket = self._section(section)
        if bucket is None or bucket.pop(key, _MISSING) is _MISSING:
            return False
        self.dirty = True
        return True

    def restore_defaults(self) -> None:
        self.data = deepcopy(self.defaults)
        self.dirty = True

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self.data)
