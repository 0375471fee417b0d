from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtGui import QFont, QFontDatabase
from PySide6.QtWidgets import QLabel, QPlainTextEdit, QTabBar, QVBoxLayout, QWidget

from docshell.layout.model import Group
from docshell.layout.view_state import ViewState
from docshell.services.document_store import FileDocumentStore


class GroupView(QWidget):
    """One editor pane: a tab bar over the active document."""

    tabActivated = Signal(str, str)  # group_id, path
    tabCloseRequested = Signal(str, str)
    focused = Signal(str)

    def __init__(
            self,
            group: Group,
            documents: FileDocumentStore,
            view_state: ViewState,
            *,
            active: bool = False,
            font_family: str = "",
            font_size: int = 0,
            parent=None,
    ):
        super().__init__(parent)
        self.group_id = group.id
        self._paths = list(group.tabs)

        self.tab_bar = QTabBar(self)
        self.tab_bar.setTabsClosable(True)
        self.tab_bar.setMovable(False)
        self.tab_bar.setDocumentMode(True)
        for path in self._paths:
            index = self.tab_bar.addTab(documents.display_name(path))
            self.tab_bar.setTabToolTip(index, path)
        if group.active_path in self._paths:
            self.tab_bar.setCurrentIndex(self._paths.index(group.active_path))

        self.editor = QPlainTextEdit(self)
        self.editor.setReadOnly(bool(group.is_read_only))
        self.editor.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.editor.setFont(self._editor_font(view_state, font_family, font_size))
        self.editor.installEventFilter(self)
        content = documents.content(group.active_path) if group.active_path else None
        self.editor.setPlainText(content or "")

        self.status = QLabel(self._status_text(group, view_state), self)
        self.status.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.set_active(active)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(0)
        lay.addWidget(self.tab_bar)
        lay.addWidget(self.editor, 1)
        lay.addWidget(self.status)

        self.tab_bar.tabBarClicked.connect(self._on_tab_clicked)
        self.tab_bar.tabCloseRequested.connect(self._on_tab_close_requested)

    @staticmethod
    def _editor_font(view_state: ViewState, family: str, size: int) -> QFont:
        if view_state.use_monospace:
            font = QFontDatabase.systemFont(QFontDatabase.FixedFont)
        else:
            font = QFont()
            if family:
                font.setFamily(family)
        if size > 0:
            font.setPointSize(size)
        return font

    def set_active(self, active: bool) -> None:
        self.active = bool(active)
        self.status.setStyleSheet("font-weight: bold;" if self.active else "")

    @staticmethod
    def _status_text(group: Group, view_state: ViewState) -> str:
        parts = ["source" if view_state.is_source_mode else "visual"]
        if view_state.is_vim_mode:
            parts.append("vim")
        if group.is_read_only:
            parts.append("read-only")
        return " | ".join(parts)

    def mousePressEvent(self, event):
        self.focused.emit(self.group_id)
        super().mousePressEvent(event)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        # Clicks inside the editor never reach mousePressEvent above.
        if watched is self.editor and event.type() == QEvent.FocusIn:
            self.focused.emit(self.group_id)
        return super().eventFilter(watched, event)

    def _on_tab_clicked(self, index: int) -> None:
        if 0 <= index < len(self._paths):
            self.tabActivated.emit(self.group_id, self._paths[index])

    def _on_tab_close_requested(self, index: int) -> None:
        if 0 <= index < len(self._paths):
            self.tabCloseRequested.emit(self.group_id, self._paths[index])
