"""termcanvas logging configuration.

Both the host and the canvas process own a terminal, so logs never go to
stdout/stderr: they are written to a rotating file (default
`~/.termcanvas/logs/termcanvas.log`, override with `TERMCANVAS_LOG_PATH`).
Level comes from `TERMCANVAS_LOG_LEVEL` (default INFO).
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "termcanvas"
LOG_FORMAT = "%(asctime)s %(levelname)s %(process)d %(name)s: %(message)s"
DEFAULT_LOG_PATH = Path("~/.termcanvas/logs/termcanvas.log")
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUP_COUNT = 3


def _log_path() -> Path:
    env_path = os.getenv("TERMCANVAS_LOG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_LOG_PATH.expanduser()


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the termcanvas logger.

    Safe to call more than once; only the first call attaches a handler.

    Args:
        level: Optional override for `TERMCANVAS_LOG_LEVEL`.
    """
    if level:
        os.environ["TERMCANVAS_LOG_LEVEL"] = level

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(os.getenv("TERMCANVAS_LOG_LEVEL", "INFO").upper())
    if logger.handlers:
        return

    path = _log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        # Unwritable log dir: drop records rather than corrupt the pane.
        handler = logging.NullHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
