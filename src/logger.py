"""Logging setup for hosts and self-tests."""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def setup_logging(log_file: Optional[str] = None, level: int = DEFAULT_LOG_LEVEL) -> Optional[str]:
    """Attach a console handler and, if log_file is given, a rotating file handler.

    Safe to call more than once: existing handlers are not duplicated.

    Args:
        log_file: Path of the log file, or None for console only
        level: Root logger level

    Returns:
        Absolute path of the log file, or None
    """
    root_logger = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    has_stream = any(
        type(handler) is logging.StreamHandler for handler in root_logger.handlers
    )
    if not has_stream:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    target = None
    if log_file:
        target = os.path.abspath(log_file)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        has_file = any(
            isinstance(handler, RotatingFileHandler) and handler.baseFilename == target
            for handler in root_logger.handlers
        )
        if not has_file:
            file_handler = RotatingFileHandler(
                target,
                maxBytes=10 * 1024 * 1024,
                backupCount=10,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    logger.debug("Logging initialized", extra={"log_file": target})
    return target
