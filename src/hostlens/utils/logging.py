"""Logging for the hostlens command line tool.

Records from the ``hostlens`` package go to stderr and to a rotating
``hostlens.log``. stdout is reserved for tool output, so nothing here writes
to it. Library users who never call :func:`setup_logging` keep full control
of their own logging tree.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["LOG_DIR_ENV", "level_for", "reset_logging", "resolve_log_dir", "setup_logging"]

LOG_DIR_ENV = "HOSTLENS_LOG_DIR"
_PACKAGE_LOGGER = "hostlens"
_DEFAULT_LOG_DIR = Path.home() / ".hostlens" / "logs"
_LOG_FILE_NAME = "hostlens.log"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_installed: list[logging.Handler] = []
_log_path: Path | None = None


def level_for(debug: bool) -> int:
    """DEBUG when ``debug_logging`` is on; otherwise only problems."""

    return logging.DEBUG if debug else logging.WARNING


def resolve_log_dir(log_dir: Path | str | None = None) -> Path:
    """``log_dir`` if given, else ``HOSTLENS_LOG_DIR``, else ``~/.hostlens/logs``."""

    return Path(log_dir or os.environ.get(LOG_DIR_ENV) or _DEFAULT_LOG_DIR).expanduser()


def setup_logging(
    debug: bool = False,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Attach stderr and rotating file handlers to the ``hostlens`` logger.

    ``debug`` and ``log_dir`` are the ``debug_logging`` and ``log_dir``
    settings. A second call is a no-op unless ``force`` is set, in which case
    the previous handlers are closed and replaced.

    Returns:
        Path of the active log file.
    """

    global _log_path
    if _installed and not force and _log_path is not None:
        return _log_path
    reset_logging()

    level = level_for(debug)
    target_dir = resolve_log_dir(log_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / _LOG_FILE_NAME
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    _installed.append(file_handler)
    if console:
        _installed.append(logging.StreamHandler())

    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in _installed:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)

    _log_path = log_path
    logger.debug("Logging to %s", log_path)
    return log_path


def reset_logging() -> None:
    """Detach and close the handlers installed by :func:`setup_logging`."""

    global _log_path
    logger = logging.getLogger(_PACKAGE_LOGGER)
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _log_path = None
