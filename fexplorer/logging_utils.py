"""File-based logging for fexplorer.

Modules use the standard pattern::

    import logging
    logger = logging.getLogger(__name__)

``setup_logging`` is called once at startup. It only ever attaches a file
handler because curses owns the terminal while the UI is running.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Max log file size: 1MB, keep 2 backups
_MAX_LOG_BYTES = 1024 * 1024
_BACKUP_COUNT = 2

LOGGER_NAME = "fexplorer"


def default_log_path() -> Path:
    state_home = os.environ.get("XDG_STATE_HOME")
    if not state_home:
        state_home = os.path.join(os.path.expanduser("~"), ".local", "state")
    return Path(state_home) / "fexplorer" / "fexplorer.log"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """Attach a rotating file handler to the package logger.

    Falls back to a ``NullHandler`` when the log directory cannot be
    created, so a read-only home never stops the UI from starting.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    path = log_file or default_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        handler = logging.NullHandler()

    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Keep records away from the root logger's stderr handler.
    logger.propagate = False
    return logger
