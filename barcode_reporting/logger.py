"""
Centralized Logging Utility

Singleton-style logger configuration shared by every report module:
a file handler under REPORT_LOGS_DIR (all levels) and a console handler whose level
comes from REPORT_LOG_LEVEL. The console is what the scheduler captures.

Both variables are read when a logger is first built, after config has applied any
local .env file.
"""

import os
import logging
from pathlib import Path
from barcode_reporting.config import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOGS_DIR,
    LOG_FILENAME,
    LOG_LEVEL_ENV,
    LOGS_DIR_ENV,
)

# Global logger instance cache
_loggers = {}

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _logs_dir() -> str:
    return os.getenv(LOGS_DIR_ENV) or DEFAULT_LOGS_DIR


def _console_level() -> int:
    raw = os.getenv(LOG_LEVEL_ENV) or DEFAULT_CONSOLE_LOG_LEVEL
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(logs_dir: str, formatter: logging.Formatter):
    """File handler in logs_dir, or None when the directory is not writable (read-only runners)."""
    try:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(logs_path / LOG_FILENAME, mode='a', encoding='utf-8')
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def _setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # Avoid duplicate handlers (singleton-style)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logs_dir = _logs_dir()
    file_handler = _file_handler(logs_dir, formatter)
    if file_handler is not None:
        logger.addHandler(file_handler)
    else:
        logger.warning(f"Cannot write to log directory '{logs_dir}'. Logging to console only.")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger instance for the given name.

    Example:
        from barcode_reporting.logger import get_logger
        logger = get_logger(__name__)
        logger.info("Module initialized")
    """
    if name not in _loggers:
        _loggers[name] = _setup_logger(name)

    return _loggers[name]
