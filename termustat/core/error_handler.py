"""
Error handling helpers for the batch extractor.

safe_execute runs one unit of work (one faculty file) and turns any failure
into a logged None, so a single bad page never stops the batch.
"""

import sys
from typing import Any, Callable

from .logger import setup_logging

logger = setup_logging()


def install_exception_hook():
    """Log unhandled exceptions of the CLI process instead of printing them raw."""
    def log_unhandled(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = log_unhandled
    return log_unhandled


def safe_execute(func: Callable, *args, **kwargs) -> Any:
    """
    Call func and return its result, or None after logging the traceback.

    Returns:
        Any: Function result or None if an exception occurred
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        logger.exception(f"Error executing {func.__name__}: {e}")
        return None
