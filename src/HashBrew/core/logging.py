"""Logging setup for HashBrew."""

import logging
import logging.handlers
import os
import threading

logger = logging.getLogger("hashbrew")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# 10 MB max per log file, keep 3 rotated backups
_LOG_MAX_BYTES = 10 * 1024 * 1024
_LOG_BACKUP_COUNT = 3
_setup_lock = threading.Lock()


def _resolve_level(level) -> int:
    numeric_level = logging.getLevelName(str(level).upper())
    if isinstance(numeric_level, int):
        return numeric_level
    logger.warning("Invalid log level '%s', defaulting to INFO", level)
    return logging.INFO


def setup_logging(level: str = "INFO", log_file: str = None):
    """Configure the ``hashbrew`` logger only.

    A console handler is attached when nothing upstream would print our
    records; handlers the host application installed on the root logger are
    left alone. ``log_file`` adds one rotating file handler per path, so
    repeated calls are safe.
    """
    with _setup_lock:
        logger.setLevel(_resolve_level(level))

        has_console = any(
            not isinstance(h, logging.FileHandler) for h in logger.handlers
        ) or bool(logging.getLogger().handlers)
        if not has_console:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(console)

        if not log_file:
            return
        target = os.path.abspath(log_file)
        if any(getattr(h, "baseFilename", None) == target for h in logger.handlers):
            return
        os.makedirs(os.path.dirname(target), exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            target, maxBytes=_LOG_MAX_BYTES, backupCount=_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
        logger.debug("Logging to %s", target)
