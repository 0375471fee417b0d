"""Logging helpers shared by the layout core and the desktop shell.

Format: [module] msg
"""

from __future__ import annotations

import logging
import os

_LOG_FORMAT = "[%(name)s] %(message)s"
LOG_LEVEL_ENV = "DOCSHELL_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None) -> None:
    """Install the root handler once; the environment wins over settings."""
    env_level = os.environ.get(LOG_LEVEL_ENV, "").strip()
    chosen = env_level or level or "INFO"
    if isinstance(chosen, str):
        chosen = logging.getLevelName(chosen.upper())
        if not isinstance(chosen, int):
            chosen = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=chosen, format=_LOG_FORMAT)
    else:
        root.setLevel(chosen)
