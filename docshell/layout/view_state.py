"""Per-group view preferences.

Kept beside the layout tree, keyed by group id, and never stored inside it.
Reading a group that has no entry yields the defaults without writing one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Iterable, Mapping

from docshell.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ViewState:
    is_source_mode: bool = True
    show_split_preview: bool = False
    is_vim_mode: bool = False
    use_monospace: bool = False
    show_line_numbers: bool = True
    show_minimap: bool = False
    minimap_width: int = 100
    show_code_snap: bool = False
    # Panel sizes are percentages of the group's width.
    editor_size: float = 50
    preview_size: float = 25
    code_snap_size: float = 25
    is_sync_scroll_enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_VIEW_STATE = ViewState()

# Side panels a freshly split group never inherits open.
TRANSIENT_PANEL_FIELDS: tuple[str, ...] = ("show_split_preview", "show_code_snap", "show_minimap")

VIEW_STATE_FIELDS: frozenset[str] = frozenset(f.name for f in fields(ViewState))

_BOOL_FIELDS = frozenset(f.name for f in fields(ViewState) if f.type in ("bool", bool))
_PERCENT_FIELDS = frozenset({"editor_size", "preview_size", "code_snap_size"})


def _clamp_number(value: Any, low: float, high: float, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if number != number:
        return fallback
    return max(low, min(high, number))


def normalize_view_updates(updates: Mapping[str, Any], base: ViewState = DEFAULT_VIEW_STATE) -> dict[str, Any]:
    unknown = set(updates) - VIEW_STATE_FIELDS
    if unknown:
        raise KeyError(f"Unknown view state field(s): {', '.join(sorted(unknown))}")

    out: dict[str, Any] = {}
    for key, value in updates.items():
        if key in _BOOL_FIELDS:
            out[key] = value if isinstance(value, bool) else getattr(base, key)
        elif key in _PERCENT_FIELDS:
            out[key] = _clamp_number(value, 1, 100, getattr(base, key))
        elif key == "minimap_width":
            out[key] = int(_clamp_number(value, 40, 400, base.minimap_width))
        else:
            out[key] = value
    return out


class ViewStateStore:
    """Dictionary of ``group id -> ViewState`` with explicit fork/clear."""

    def __init__(self, initial: Mapping[str, ViewState] | None = None) -> None:
        self._states: dict[str, ViewState] = dict(initial or {})

    def get(self, group_id: str) -> ViewState:
        return self._states.get(group_id, DEFAULT_VIEW_STATE)

    def has(self, group_id: str) -> bool:
        return group_id in self._states

    def group_ids(self) -> list[str]:
        return list(self._states)

    def set(self, group_id: str, updates: Mapping[str, Any] | None = None, **kwargs: Any) -> ViewState:
        """Shallow-merge ``updates`` into the group's state (or the defaults)."""
        merged_updates = dict(updates or {})
        merged_updates.update(kwargs)
        current = self.get(group_id)
        state = replace(current, **normalize_view_updates(merged_updates, current))
        self._states[group_id] = state
        return state

    def fork(self, source_group_id: str, target_group_id: str) -> ViewState:
        """Copy the source's state to a new group with its side panels closed."""
        state = replace(self.get(source_group_id), **{name: False for name in TRANSIENT_PANEL_FIELDS})
        self._states[target_group_id] = state
        return state

    def clear(self, group_id: str) -> bool:
        return self._states.pop(group_id, None) is not None

    def prune(self, live_group_ids: Iterable[str]) -> list[str]:
        """Drop entries for groups that are no longer in the layout."""
        live = set(live_group_ids)
        stale = [group_id for group_id in self._states if group_id not in live]
        for group_id in stale:
            del self._states[group_id]
        if stale:
            logger.debug("Pruned view state for %d closed group(s)", len(stale))
        return stale

    def snapshot(self) -> dict[str, dict[str, Any]]:
        return {group_id: state.to_dict() for group_id, state in self._states.items()}

    def __len__(self) -> int:
        return len(self._states)
