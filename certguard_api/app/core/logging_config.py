"""
Logging setup for the CertGuard service.

Records go to stderr and, when ``LOG_FILE`` is set, to a size-rotated
file next to it (``LOG_FILE_MAX_BYTES`` / ``LOG_FILE_BACKUPS``).  The
handlers installed here are tagged, so calling ``setup_logging`` again
(every ``create_app`` does) is a no-op, while handlers that other tools
put on the root logger, such as pytest's capture handler, are left
alone and do not stop the service from configuring its own.

Uvicorn's access and error loggers are pointed at the same handlers so
one format covers the whole process.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional


LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_HANDLER_TAG = "_certguard_handler"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def installed_handlers(logger: Optional[logging.Logger] = None) -> List[logging.Handler]:
    """Handlers on ``logger`` (the root logger by default) added by ``setup_logging``."""
    logger = logger or logging.getLogger()
    return [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backups: int = 3,
) -> None:
    """Install the service's handlers on the root logger once.

    ``level`` is a level name, case-insensitive; unknown names mean
    ``INFO``.  A ``logfile`` whose directory does not exist yet gets
    the directory created.
    """
    root = logging.getLogger()
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)

    if installed_handlers(root):
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [_tag(logging.StreamHandler())]
    if logfile:
        path = Path(logfile).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _tag(RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"))
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True
