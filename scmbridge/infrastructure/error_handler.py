"""
Error taxonomy and error handling helpers for scmbridge.

Provider failures are mapped onto a small set of exceptions so callers can
branch on the kind of failure (missing resource, capability gap, bad
signature, bad input) without knowing which provider produced it.
Transport and decode errors are never wrapped.
"""

import functools
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

from .logger import logger


F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class ScmError(Exception):
    """Base exception for all scmbridge errors."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        operation: Optional[str] = None,
        identifier: Optional[str] = None,
    ):
        self.message = message
        self.original_error = original_error
        self.operation = operation
        self.identifier = identifier
        super().__init__(message)

    def __str__(self) -> str:
        text = self.message
        if self.operation:
            target = f" {self.identifier}" if self.identifier else ""
            text = f"{self.operation}{target}: {text}"
        if self.original_error:
            text = f"{text} (Original: {self.original_error})"
        return text


class NotFoundError(ScmError):
    """Raised when the provider reports that a resource does not exist."""


class NotSupportedError(ScmError):
    """Raised when a provider has no equivalent for an operation."""

    def __init__(self, message: str = "operation not supported", **kwargs: Any):
        super().__init__(message, **kwargs)


class SignatureInvalidError(ScmError):
    """Raised when a webhook payload fails signature verification."""

    def __init__(self, message: str = "invalid webhook signature", **kwargs: Any):
        super().__init__(message, **kwargs)


class ValidationError(ScmError, ValueError):
    """Raised for malformed caller input, before any request is made."""


class UnauthorizedError(ScmError):
    """Raised when the provider rejects the credentials (HTTP 401)."""


class ApiError(ScmError):
    """Raised for any other non-successful provider response."""

    def __init__(self, message: str, status: int, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.status = status


def _error_message(response: httpx.Response) -> str:
    """Pull the provider's error message out of a response body."""

    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def raise_for_status(response: httpx.Response) -> None:
    """Map a non-2xx provider response onto the error taxonomy."""

    if response.is_success:
        return

    message = _error_message(response)
    status = response.status_code
    if status == 404:
        raise NotFoundError(message)
    if status == 401:
        raise UnauthorizedError(message)
    raise ApiError(message, status=status)


def handle_api_error(operation: str) -> Callable[[F], F]:
    """
    Decorator attaching operation context to scmbridge errors.

    The first positional argument after ``self`` is recorded as the
    identifier (repository, organization, ...). Errors are logged and
    re-raised unchanged; nothing is retried or swallowed.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except ScmError as e:
                if e.operation is None:
                    e.operation = operation
                if e.identifier is None and len(args) > 1 and isinstance(args[1], str):
                    e.identifier = args[1]
                if isinstance(e, NotSupportedError):
                    logger.debug(str(e))
                else:
                    logger.warning(str(e))
                raise

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = [
    "ScmError",
    "NotFoundError",
    "NotSupportedError",
    "SignatureInvalidError",
    "ValidationError",
    "UnauthorizedError",
    "ApiError",
    "raise_for_status",
    "handle_api_error",
]
