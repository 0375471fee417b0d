"""Document content cache consumed by the layout controller.

The layout core only asks whether a path can be shown; reading, caching and
dirty tracking live here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from docshell.log import get_logger
from docshell.services.file_io import read_text

logger = get_logger(__name__)


class DocumentStore(Protocol):
    def ensure_document_loaded(self, path: str) -> bool:
        ...


class FileDocumentStore:
    """Reads documents from disk once and keeps their text in memory."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._contents: dict[str, str] = {}

    def ensure_document_loaded(self, path: str) -> bool:
        if path in self._contents:
            return True
        try:
            text = read_text(path, encoding=self._encoding, errors="replace")
        except OSError as exc:
            logger.warning("Could not open %s: %s", path, exc)
            return False
        self._contents[path] = text
        return True

    def is_loaded(self, path: str) -> bool:
        return path in self._contents

    def content(self, path: str) -> str | None:
        return self._contents.get(path)

    def forget(self, path: str) -> None:
        self._contents.pop(path, None)

    def loaded_paths(self) -> list[str]:
        return list(self._contents)

    @staticmethod
    def display_name(path: str) -> str:
        return Path(path).name or path
