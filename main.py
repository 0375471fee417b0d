import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from docshell.log import configure_logging, get_logger
from docshell.settings_manager import SettingsManager
from docshell.settings_store import SettingsStoreError
from docshell.ui.main_window import MainWindow


def _canonical_existing_dir(path_value: str | None) -> str | None:
    text = str(path_value or "").strip()
    if not text:
        return None
    candidate = Path(text).expanduser()
    if not candidate.is_dir():
        return None
    try:
        return str(candidate.resolve())
    except OSError:
        return str(candidate)


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv if argv is None else argv)
    settings = SettingsManager()
    settings.load()
    configure_logging(settings.log_level())

    app = QApplication(args)
    app.setApplicationName("docshell")

    window = MainWindow(settings)
    explicit = _canonical_existing_dir(args[1]) if len(args) > 1 else None
    if explicit is not None:
        window.load_workspace(explicit)
    window.show()

    code = app.exec()
    try:
        settings.store.save_if_dirty()
    except SettingsStoreError as exc:
        get_logger(__name__).warning("%s", exc)
    return code


if __name__ == "__main__":
    sys.exit(main())
