"""Qt-aware controllers used by the main window."""

from .layout_controller import EditorLayoutController

__all__ = ["EditorLayoutController"]
