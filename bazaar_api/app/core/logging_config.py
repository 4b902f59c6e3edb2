"""
Logging setup for the Bazaar Ramadhan API.

``setup_logging`` reads ``LOG_LEVEL`` and ``LOG_FILE`` from
:mod:`bazaar_api.app.core.config` unless told otherwise.  A relative
``LOG_FILE`` lives next to the SQLite database under ``bazaar_api/``,
so the server writes to the same place whatever directory it was
started from.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_log_path(logfile: str) -> Path:
    """Return the absolute path for ``logfile``."""
    path = Path(logfile)
    if not path.is_absolute():
        path = Path(__file__).resolve().parent.parent.parent / path  # bazaar_api/
    return path.resolve()


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : Optional[str]
        Level name, case insensitive.  Defaults to ``settings.log_level``;
        unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File to log to in addition to the console.  Defaults to
        ``settings.log_file``; empty means console only.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    level = level or settings.log_level
    logfile = logfile if logfile is not None else settings.log_file
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = resolve_log_path(logfile)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
