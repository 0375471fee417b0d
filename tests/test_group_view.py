"""Tests for the single editor pane widget (offscreen)."""

import pytest
from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QFocusEvent
from PySide6.QtWidgets import QApplication

from docshell.layout.model import Group
from docshell.layout.view_state import DEFAULT_VIEW_STATE, ViewState
from docshell.services.document_store import FileDocumentStore


@pytest.fixture
def make_view(qapp):
    from docshell.ui.widgets.group_view import GroupView

    created = []

    def _make(group=None, view_state=DEFAULT_VIEW_STATE, **kwargs):
        view = GroupView(group or Group("g1", ("a.md",), "a.md"), FileDocumentStore(), view_state, **kwargs)
        created.append(view)
        return view

    yield _make
    for view in created:
        view.deleteLater()


def test_focus_in_editor_reports_group(make_view):
    view = make_view()
    seen = []
    view.focused.connect(lambda group_id: seen.append(group_id))

    QApplication.sendEvent(view.editor, QFocusEvent(QEvent.FocusIn, Qt.MouseFocusReason))

    assert seen == ["g1"]


def test_focus_out_is_ignored(make_view):
    view = make_view()
    seen = []
    view.focused.connect(lambda group_id: seen.append(group_id))

    QApplication.sendEvent(view.editor, QFocusEvent(QEvent.FocusOut, Qt.MouseFocusReason))

    assert seen == []


def test_configured_font_is_applied(make_view):
    view = make_view(font_family="Serif", font_size=17)

    assert view.editor.font().pointSize() == 17
    assert view.editor.font().family() == "Serif"


def test_monospace_keeps_configured_size(make_view):
    view = make_view(view_state=ViewState(use_monospace=True), font_family="Serif", font_size=15)
    assert view.editor.font().pointSize() == 15


def test_active_marker_moves(make_view):
    view = make_view(active=True)
    assert view.active is True

    view.set_active(False)

    assert view.active is False
    assert view.status.styleSheet() == ""


def test_read_only_group(make_view):
    view = make_view(group=Group("g2", (), None, True))
    assert view.editor.isReadOnly()
    assert "read-only" in view.status.text()
