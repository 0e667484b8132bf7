"""
Process-wide logging setup.

``setup_logging`` is called from ``create_app``.  It installs one console
handler on the root logger and, when ``LOG_FILE`` is set, a size-rotated
file handler.  Calling it again (the test-suite builds many apps) only
adjusts the level.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONSOLE_HANDLER_NAME = "service_directory_console"

# Chatty third-party loggers and the most verbose level we let through.
_QUIET_LOGGERS = {
    "stripe": logging.WARNING,
    "multipart": logging.INFO,
}


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    ``level`` is a level name, case insensitive; unknown names fall back
    to INFO.  ``logfile`` adds a file handler rotating at 5 MB with three
    backups; its directory is created if missing.
    """
    root = logging.getLogger()
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)

    if any(h.get_name() == _CONSOLE_HANDLER_NAME for h in root.handlers):
        return

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console = logging.StreamHandler()
    console.set_name(_CONSOLE_HANDLER_NAME)
    console.setFormatter(formatter)
    root.addHandler(console)

    if logfile:
        path = Path(logfile).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name, floor in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(numeric_level, floor))
