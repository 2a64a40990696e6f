"""Logging setup for asset builds.

Standalone runs configure the root logger. When a host application has
already installed root handlers, only the ``asset_mill`` hierarchy is
touched.
"""

import logging
import logging.handlers
import os
import threading

logger = logging.getLogger("asset_mill")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_MAX_BYTES = 5 * 1024 * 1024
_LOG_BACKUP_COUNT = 3
_lock = threading.Lock()


def _resolve_level(level) -> int:
    numeric = logging.getLevelName(str(level).upper())
    if isinstance(numeric, int):
        return numeric
    logger.warning("Invalid log level '%s', defaulting to INFO", level)
    return logging.INFO


def _file_handler(log_file: str) -> logging.Handler:
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=_LOG_MAX_BYTES, backupCount=_LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _has_file_handler(target: logging.Logger, log_file: str) -> bool:
    wanted = os.path.abspath(log_file)
    return any(
        getattr(h, "baseFilename", None) == wanted for h in target.handlers
    )


def setup_logging(level: str = "INFO", log_file: str = None, force: bool = False):
    """Configure build logging, optionally mirrored to a rotating file."""
    with _lock:
        numeric = _resolve_level(level)
        root = logging.getLogger()
        if force or not root.handlers:
            handlers = [logging.StreamHandler()]
            if log_file:
                handlers.append(_file_handler(log_file))
            logging.basicConfig(level=numeric, format=LOG_FORMAT,
                                handlers=handlers, force=force)
            return

        logger.setLevel(numeric)
        if log_file and not _has_file_handler(logger, log_file):
            logger.addHandler(_file_handler(log_file))
            logger.info("Logging builds to %s", os.path.abspath(log_file))
