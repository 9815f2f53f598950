"""
Rate-limit metadata extraction.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

import httpx

from ..models.response import Rate


@dataclass(frozen=True)
class RateHeaders:
    """Names of the headers a provider reports its quota in."""

    limit: str = "X-RateLimit-Limit"
    remaining: str = "X-RateLimit-Remaining"
    reset: str = "X-RateLimit-Reset"


GITHUB_RATE_HEADERS = RateHeaders()


def _int_header(headers: httpx.Headers, name: str) -> int:
    try:
        return int(headers.get(name, 0))
    except (TypeError, ValueError):
        return 0


def extract_rate(headers: Mapping[str, str], names: Optional[RateHeaders]) -> Rate:
    """
    Read provider rate-limit headers into a ``Rate``.

    Missing or unparseable headers yield zeros, i.e. "unknown".
    """
    if names is None:
        return Rate()

    normalized = httpx.Headers(headers)
    return Rate(
        limit=_int_header(normalized, names.limit),
        remaining=_int_header(normalized, names.remaining),
        reset=_int_header(normalized, names.reset),
    )


__all__ = [
    "RateHeaders",
    "GITHUB_RATE_HEADERS",
    "extract_rate",
]
