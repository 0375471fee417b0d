from __future__ import annotations

from pathlib import Path
from typing import Any

from docshell.layout.tree import WeightPolicy
from docshell.settings_models import (
    EditorFontConfig,
    LayoutConfig,
    SettingsPaths,
    default_ide_settings,
    normalize_editor_font,
    normalize_layout_settings,
)
from docshell.settings_store import JsonSettingsStore


class SettingsManager:
    """Application-wide settings backed by ``ide-settings.json``."""

    def __init__(self, paths: SettingsPaths | None = None, *, persistent: bool = True) -> None:
        self.paths = paths or SettingsPaths.default()
        self.store = JsonSettingsStore(self.paths.ide_file, default_ide_settings(), persistent=persistent)

    @classmethod
    def in_directory(cls, app_dir: str | Path, *, persistent: bool = True) -> "SettingsManager":
        return cls(SettingsPaths(Path(app_dir)), persistent=persistent)

    def load(self) -> dict[str, Any]:
        return self.store.load()

    def save(self) -> None:
        self.store.save()

    def get(self, key: str, default: Any = None) -> Any:
        return self.store.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        return self.store.set(key, value)

    @property
    def last_error(self) -> str | None:
        return self.store.last_error

    def layout_config(self) -> LayoutConfig:
        return normalize_layout_settings(self.store.get("layout"))

    def editor_font(self) -> EditorFontConfig:
        return normalize_editor_font(self.store.get("font_family"), self.store.get("font_size"))

    def weight_policy(self) -> WeightPolicy:
        return self.layout_config().weight_policy

    def recent_limit(self) -> int:
        try:
            return max(1, int(self.store.get("workspace.recent_limit", 20)))
        except (TypeError, ValueError):
            return 20

    def restore_last_workspace(self) -> bool:
        return bool(self.store.get("workspace.restore_last", True))

    def log_level(self) -> str:
        return str(self.store.get("logging.level", "INFO") or "INFO").upper()
