"""
Request options and response metadata.

``Page`` and ``Rate`` describe a response, not an entity; drivers return
them inside a ``Response`` next to the decoded entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..infrastructure.error_handler import ValidationError
from .base import SerializableModel


@dataclass(frozen=True)
class ListOptions(SerializableModel):
    """Canonical pagination request. ``size`` is advisory; providers cap it."""

    page: int = 0
    size: int = 0

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValidationError("page cannot be negative")
        if self.size < 0:
            raise ValidationError("size cannot be negative")


@dataclass(frozen=True)
class CommitListOptions(ListOptions):
    """Pagination plus the ref and path a commit listing is scoped to."""

    ref: str = ""
    path: str = ""


@dataclass(frozen=True)
class Page(SerializableModel):
    """Canonical page links; ``None`` means the relation is absent."""

    first: Optional[int] = None
    next: Optional[int] = None
    prev: Optional[int] = None
    last: Optional[int] = None
    next_url: Optional[str] = None

    @property
    def has_next(self) -> bool:
        return self.next is not None or self.next_url is not None


@dataclass(frozen=True)
class Rate(SerializableModel):
    """
    Provider quota counters. All zeros means the provider reported nothing,
    which is "unknown", never "exhausted".
    """

    limit: int = 0
    remaining: int = 0
    reset: int = 0  # unix time

    @property
    def is_known(self) -> bool:
        return bool(self.limit or self.remaining or self.reset)


@dataclass(frozen=True)
class Response(SerializableModel):
    """Metadata of the provider response that produced a result."""

    status: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    page: Page = field(default_factory=Page)
    rate: Rate = field(default_factory=Rate)
    request_id: str = ""


__all__ = [
    "ListOptions",
    "CommitListOptions",
    "Page",
    "Rate",
    "Response",
]
