"""
scmbridge: one client contract over GitHub, Gitea and Gogs REST APIs.
"""

from .interfaces.api import Client, register_driver
from .infrastructure.error_handler import (
    ScmError,
    NotFoundError,
    NotSupportedError,
    SignatureInvalidError,
    ValidationError,
    UnauthorizedError,
    ApiError,
)
from .models import ClientConfig, CommitListOptions, ListOptions

__version__ = "0.1.0"

__all__ = [
    "Client",
    "register_driver",
    "ClientConfig",
    "ListOptions",
    "CommitListOptions",
    "ScmError",
    "NotFoundError",
    "NotSupportedError",
    "SignatureInvalidError",
    "ValidationError",
    "UnauthorizedError",
    "ApiError",
]
