import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import List

from wrapcommand.core.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILE = LOG_DIR / settings.LOG_FILE_NAME
LOG_FORMAT = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"

_handlers: List[logging.Handler] = []


def _shared_handlers() -> List[logging.Handler]:
    """
    One rotating file handler and one console handler for the whole service.

    Every module logger writes to the same file, so they must share the
    handler that rotates it.
    """
    if not _handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        console_handler = logging.StreamHandler(sys.stdout)
        for handler in (file_handler, console_handler):
            handler.setFormatter(formatter)
            _handlers.append(handler)
    return _handlers


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # Loggers are cached by name; attach the shared handlers only once
    if not logger.handlers:
        for handler in _shared_handlers():
            logger.addHandler(handler)
        logger.setLevel(settings.LOG_LEVEL.upper())
        logger.propagate = False

    return logger
