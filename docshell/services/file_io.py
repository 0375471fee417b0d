"""Disk helpers for documents and the JSON state files.

Writes go through a temporary file in the target directory followed by
``os.replace`` so a crash never leaves a half-written settings file behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_text(path: str | Path, *, encoding: str = "utf-8", errors: str = "strict") -> str:
    return Path(path).read_text(encoding=encoding, errors=errors)


def read_json_object(path: str | Path) -> dict[str, Any]:
    """Parse a JSON file whose root must be an object.

    Raises ``OSError`` when the file cannot be read and ``ValueError`` when it
    is not valid JSON or the root is something other than an object.
    """
    raw = json.loads(read_text(path))
    if not isinstance(raw, dict):
        raise ValueError(f"root of '{path}' must be a JSON object, found {type(raw).__name__}")
    return raw


def atomic_write_text(path: str | Path, text: str, *, encoding: str = "utf-8") -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_json(path: str | Path, data: Any) -> None:
    atomic_write_text(path, json.dumps(data, indent=2, sort_keys=True) + "\n")
