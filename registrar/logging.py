"""Logging setup for registrar.

Modules ask for loggers under the ``registrar`` namespace and stay silent
until an application calls ``setup_logging``.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_FILE = "registrar.log"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "registrar"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def _file_handler(log_dir: str | Path, log_file: str, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(log_dir / log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Attach handlers to the ``registrar`` logger and return it.

    A rotating file is written only when ``log_dir`` or ``REGISTRAR_LOG_DIR``
    is given. ``REGISTRAR_LOG_LEVEL`` applies when ``level`` is not passed.
    Calling this again replaces the handlers from the previous call.
    """
    if log_dir is None:
        log_dir = os.environ.get("REGISTRAR_LOG_DIR")
    if level is None:
        level = os.environ.get("REGISTRAR_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())

    handlers: list[logging.Handler] = []
    if log_dir is not None:
        handlers.append(_file_handler(log_dir, log_file, max_bytes, backup_count))
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Registrar logging at %s (file: %s)", level.upper(), log_dir or "none")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. ``get_logger("core.ledger")``."""
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
