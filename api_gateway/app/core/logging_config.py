"""
Logging setup for the gateway process.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger once per process.  Every gateway module
logs through ``logging.getLogger(__name__)``, so the records carry the
module path as logger name, e.g. ``api_gateway.app.services.proxy_service``.

``httpx`` logs one INFO line per outgoing request.  The proxy already
logs each forwarded request itself, so ``httpx`` and ``httpcore`` are
lowered to WARNING unless the gateway runs at DEBUG.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CHATTY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to INFO.
    logfile : Optional[str]
        Path of a file to append log records to.  Parent directories
        are created when missing.  If omitted, only the console is used.
    """
    root = logging.getLogger()
    if root.handlers:
        # create_app may be called many times in one process (tests).
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if numeric_level > logging.DEBUG:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
