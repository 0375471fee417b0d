from __future__ import annotations

import os
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import QFileDialog, QMainWindow, QMessageBox

from docshell.layout.model import Group
from docshell.settings_manager import SettingsManager
from docshell.settings_store import SettingsStoreError
from docshell.services.document_store import FileDocumentStore
from docshell.ui.controllers.layout_controller import EditorLayoutController
from docshell.ui.layout_renderer import LayoutRenderer
from docshell.ui.widgets.group_view import GroupView
from docshell.workspace_store import WorkspaceStateStore, restore_documents
from docshell.log import get_logger

logger = get_logger(__name__)

AUTOSAVE_DELAY_MS = 1000


class MainWindow(QMainWindow):
    def __init__(self, settings: SettingsManager, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.documents = FileDocumentStore()
        self.workspaces = WorkspaceStateStore(
            settings.paths.workspaces_file,
            recent_limit=settings.recent_limit(),
        )
        self.workspaces.load()
        self.root_dir: str | None = None

        layout_cfg = settings.layout_config()
        self.controller = EditorLayoutController(self.documents, weight_policy=layout_cfg.weight_policy, parent=self)
        self.editor_font = settings.editor_font()
        self.renderer = LayoutRenderer(
            self._make_group_view,
            handle_width=layout_cfg.handle_width,
            min_pane_percent=layout_cfg.min_pane_percent,
            parent=self,
        )
        self.setCentralWidget(self.renderer)

        self._autosave_timer = QTimer(self)
        self._autosave_timer.setSingleShot(True)
        self._autosave_timer.timeout.connect(self._save_workspace_state)

        self.controller.layoutChanged.connect(self._on_layout_changed)
        self.controller.activeGroupChanged.connect(self._on_active_group_changed)
        self.renderer.sizesChanged.connect(self.controller.resize_split)

        self._build_menus()
        self.resize(1200, 800)
        self._refresh_title()
        self.renderer.render(self.controller.layout)

        if settings.restore_last_workspace() and self.workspaces.last_opened:
            if not self.load_workspace(self.workspaces.last_opened):
                self.workspaces.forget_last_opened()

    # -------- menus --------

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        self._add_action(file_menu, "Open &Folder...", self._prompt_open_folder, "Ctrl+Shift+O")
        self._add_action(file_menu, "&Open File...", self._prompt_open_file, QKeySequence.Open)
        file_menu.addSeparator()
        self._add_action(file_menu, "&Quit", self.close, QKeySequence.Quit)

        view_menu = self.menuBar().addMenu("&View")
        self._add_action(view_menu, "Split &Right", lambda: self.controller.split_group(None, "horizontal"), "Ctrl+\\")
        self._add_action(view_menu, "Split &Down", lambda: self.controller.split_group(None, "vertical"), "Ctrl+Shift+\\")
        self._add_action(view_menu, "&Close Group", self._close_active_group, "Ctrl+Shift+W")
        view_menu.addSeparator()
        self._add_action(view_menu, "Toggle Read-&Only", lambda: self.controller.toggle_read_only(self.controller.active_group_id))
        self._add_action(view_menu, "Toggle &Monospace", lambda: self._toggle_view_flag("use_monospace"))
        self._add_action(view_menu, "Toggle &Vim Mode", lambda: self._toggle_view_flag("is_vim_mode"))
        self._add_action(view_menu, "Toggle &Source Mode", lambda: self._toggle_view_flag("is_source_mode"))

    def _add_action(self, menu, text: str, slot, shortcut=None) -> QAction:
        act = QAction(text, self)
        if shortcut is not None:
            act.setShortcut(QKeySequence(shortcut))
        act.triggered.connect(lambda _checked=False: slot())
        menu.addAction(act)
        return act

    # -------- groups --------

    def _make_group_view(self, group: Group, _index: int) -> GroupView:
        view = GroupView(
            group,
            self.documents,
            self.controller.view_state(group.id),
            active=group.id == self.controller.active_group_id,
            font_family=self.editor_font.family,
            font_size=self.editor_font.point_size,
        )
        view.tabActivated.connect(self.controller.switch_tab)
        view.tabCloseRequested.connect(lambda gid, path: self.controller.close_tab(path, gid))
        view.focused.connect(self.controller.set_active_group)
        return view

    def _close_active_group(self) -> None:
        if not self.controller.close_group(self.controller.active_group_id):
            self.statusBar().showMessage("The last editor group cannot be closed.", 3000)

    def _toggle_view_flag(self, name: str) -> None:
        group_id = self.controller.active_group_id
        current = getattr(self.controller.view_state(group_id), name)
        self.controller.set_view_state(group_id, **{name: not current})
        self._rerender()

    def _rerender(self) -> None:
        self.renderer.rebuild(self.controller.layout)

    def _on_layout_changed(self, layout) -> None:
        self.renderer.render(layout)
        self._schedule_autosave()

    def _on_active_group_changed(self, group_id: str) -> None:
        # Widgets stay; only the active marker moves.
        for gid, view in self.renderer.group_widgets().items():
            view.set_active(gid == group_id)
        self._schedule_autosave()

    # -------- workspace --------

    def _prompt_open_folder(self) -> None:
        start = self.root_dir or str(Path.home())
        path = QFileDialog.getExistingDirectory(self, "Open Folder", start)
        if path:
            self.load_workspace(path)

    def _prompt_open_file(self) -> None:
        start = self.root_dir or str(Path.home())
        path, _ = QFileDialog.getOpenFileName(self, "Open File", start)
        if path and not self.controller.open_tab(path):
            QMessageBox.warning(self, "Open File", f"Could not open:\n{path}")

    def load_workspace(self, path: str) -> bool:
        if not os.path.isdir(path):
            logger.warning("Workspace folder %s no longer exists", path)
            return False
        if self.root_dir is not None:
            self._save_workspace_state()
        self.root_dir = path
        snapshot = self.workspaces.load_state(path)
        restore_documents(snapshot, self.documents)
        self.controller.restore(snapshot)
        self.workspaces.touch_workspace(path)
        self._refresh_title()
        self._rerender()
        self._schedule_autosave()
        return True

    def _refresh_title(self) -> None:
        name = Path(self.root_dir).name if self.root_dir else "No Folder"
        self.setWindowTitle(f"{name} - docshell")

    def _schedule_autosave(self) -> None:
        if self.root_dir is not None:
            self._autosave_timer.start(AUTOSAVE_DELAY_MS)

    def _save_workspace_state(self) -> None:
        if self.root_dir is None:
            return
        self.workspaces.save_state(self.root_dir, self.controller.snapshot())
        try:
            self.workspaces.save()
        except SettingsStoreError as exc:
            logger.warning("%s", exc)
            self.statusBar().showMessage(str(exc), 5000)

    def closeEvent(self, event: QCloseEvent):
        self._autosave_timer.stop()
        self._save_workspace_state()
        super().closeEvent(event)
