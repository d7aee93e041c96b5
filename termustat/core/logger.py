"""
Logging setup for the Termustat timetable engine.

All modules share the ``termustat`` logger. Its handlers are built once;
LOG_LEVEL and LOG_FILE are read from the environment at that moment, so
core.config loads ``.env`` before the first call (the package __init__
imports it first).
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = 'termustat'
DEFAULT_LOG_FILE = Path(__file__).parent.parent / 'termustat.log'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


def _level_from_env():
    return logging.getLevelName(os.getenv('LOG_LEVEL', 'INFO').upper())


def setup_logging(log_level=None, log_file=None):
    """
    Return the engine logger, building its handlers on the first call.

    Args:
        log_level: Level to apply. When given it is re-applied on every
            call; when omitted the first call uses LOG_LEVEL.
        log_file: Rotating log file; falls back to LOG_FILE, then to
            termustat.log beside the package. Empty disables the file.

    Returns:
        logging.Logger: The ``termustat`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers:
        if log_level is not None:
            _apply_level(logger, log_level)
        return logger

    if log_level is None:
        log_level = _level_from_env()
        if not isinstance(log_level, int):
            log_level = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    if log_file is None:
        log_file = os.getenv('LOG_FILE', str(DEFAULT_LOG_FILE))

    if log_file:
        # 10MB max, 5 backup files
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    _apply_level(logger, log_level)
    return logger


def _apply_level(logger, log_level):
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
