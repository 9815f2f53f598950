"""
Package logger for scmbridge.

Every module logs through the single ``scmbridge`` logger so that callers
can tune verbosity in one place (see ``Client.set_verbose``).
"""

import logging
import sys


LOGGER_NAME = "scmbridge"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Return the package logger.

    Records propagate to the host application's handlers. A stderr handler
    is attached only when the root logger has none.
    """

    _logger = logging.getLogger(name)
    if not _logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)
    if _logger.level == logging.NOTSET:
        _logger.setLevel(logging.INFO)
    return _logger


logger = get_logger()


__all__ = [
    "LOGGER_NAME",
    "get_logger",
    "logger",
]
