from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypedDict

from docshell.layout.tree import WeightPolicy

APP_DIR_ENV = "DOCSHELL_HOME"
APP_DIRNAME = ".docshell"


class LayoutSettings(TypedDict, total=False):
    weight_policy: str  # last | neighbor | proportional
    min_pane_percent: float
    handle_width: int


class WorkspaceSettings(TypedDict, total=False):
    restore_last: bool
    recent_limit: int


class LoggingSettings(TypedDict, total=False):
    level: str


class IdeSettings(TypedDict, total=False):
    font_size: int
    font_family: str
    layout: LayoutSettings
    workspace: WorkspaceSettings
    logging: LoggingSettings


@dataclass(frozen=True)
class SettingsPaths:
    app_dir: Path
    ide_filename: str = "ide-settings.json"
    workspaces_filename: str = "workspaces.json"
    ide_file: Path = field(init=False)
    workspaces_file: Path = field(init=False)

    def __post_init__(self) -> None:
        app_dir = Path(self.app_dir).expanduser().resolve()
        object.__setattr__(self, "app_dir", app_dir)
        object.__setattr__(self, "ide_file", app_dir / self.ide_filename)
        object.__setattr__(self, "workspaces_file", app_dir / self.workspaces_filename)

    @classmethod
    def default(cls) -> "SettingsPaths":
        override = os.environ.get(APP_DIR_ENV, "").strip()
        if override:
            return cls(Path(override))
        return cls(Path.home() / APP_DIRNAME)


def default_ide_settings() -> IdeSettings:
    return {
        "font_size": 11,
        "font_family": "",
        "layout": {
            "weight_policy": WeightPolicy.LAST.value,
            "min_pane_percent": 10.0,
            "handle_width": 6,
        },
        "workspace": {
            "restore_last": True,
            "recent_limit": 20,
        },
        "logging": {
            "level": "INFO",
        },
    }


@dataclass(frozen=True)
class LayoutConfig:
    weight_policy: WeightPolicy
    min_pane_percent: float
    handle_width: int


def normalize_layout_settings(raw: Any) -> LayoutConfig:
    defaults = default_ide_settings()["layout"]
    data: dict[str, Any] = dict(defaults)
    if isinstance(raw, dict):
        data.update(raw)

    def _clamp(value: Any, low: float, high: float, fallback: float) -> float:
        try:
            return max(low, min(high, float(value)))
        except (TypeError, ValueError):
            return fallback

    return LayoutConfig(
        weight_policy=WeightPolicy.parse(data.get("weight_policy"), WeightPolicy.LAST),
        min_pane_percent=_clamp(data.get("min_pane_percent"), 0.0, 45.0, float(defaults["min_pane_percent"])),
        handle_width=int(_clamp(data.get("handle_width"), 1, 24, defaults["handle_width"])),
    )


@dataclass(frozen=True)
class EditorFontConfig:
    family: str
    point_size: int


def normalize_editor_font(family: Any, size: Any) -> EditorFontConfig:
    defaults = default_ide_settings()
    text = family.strip() if isinstance(family, str) else defaults["font_family"]
    try:
        point_size = int(size)
    except (TypeError, ValueError):
        point_size = defaults["font_size"]
    return EditorFontConfig(family=text, point_size=max(6, min(72, point_size)))
