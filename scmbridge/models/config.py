"""
Configuration models for scmbridge clients.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ..infrastructure.error_handler import ValidationError


@dataclass
class ClientConfig:
    """
    Settings for one client instance.

    Each ``Client`` owns its own config; nothing here is process-wide, so
    clients for different providers or servers can coexist.
    """

    # Provider endpoint; the driver's public default is used when empty
    base_url: Optional[str] = None
    token: Optional[str] = None

    # Transport settings
    timeout: float = 30.0  # seconds, per request
    user_agent: str = "scmbridge"

    # Page size assumed by the short-page heuristic when the caller passes none
    default_page_size: int = 30

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValidationError("timeout must be positive")
        if self.default_page_size <= 0:
            raise ValidationError("default_page_size must be positive")
        if self.base_url:
            self.base_url = self.base_url.rstrip("/")

    @classmethod
    def from_env(cls, prefix: str = "SCM") -> "ClientConfig":
        """Build a config from ``<PREFIX>_BASE_URL``, ``_TOKEN`` and ``_TIMEOUT``."""

        timeout = os.environ.get(f"{prefix}_TIMEOUT")
        try:
            timeout_value = float(timeout) if timeout else 30.0
        except ValueError as e:
            raise ValidationError(f"{prefix}_TIMEOUT must be a number", e)
        return cls(
            base_url=os.environ.get(f"{prefix}_BASE_URL") or None,
            token=os.environ.get(f"{prefix}_TOKEN") or None,
            timeout=timeout_value,
        )


__all__ = [
    "ClientConfig",
]
