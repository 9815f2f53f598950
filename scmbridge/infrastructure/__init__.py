"""
Infrastructure pieces shared by every driver: logging, errors, transport.
"""

from .error_handler import (
    ScmError,
    NotFoundError,
    NotSupportedError,
    SignatureInvalidError,
    ValidationError,
    UnauthorizedError,
    ApiError,
)
from .logger import logger
from .transport import Transport, HttpxTransport

__all__ = [
    "ScmError",
    "NotFoundError",
    "NotSupportedError",
    "SignatureInvalidError",
    "ValidationError",
    "UnauthorizedError",
    "ApiError",
    "logger",
    "Transport",
    "HttpxTransport",
]
