"""
Serialization helpers shared by the canonical models.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


def _serialize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value


class SerializableModel:
    """Mixin giving dataclasses a JSON-compatible ``to_dict``."""

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(self)


def parse_timestamp(value: Optional[Union[str, int, float]]) -> Optional[datetime]:
    """
    Parse a provider timestamp into an aware datetime.

    Accepts ISO-8601 strings and unix epoch numbers (GitHub push payloads
    report repository times as integers).
    """

    if not value:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = [
    "SerializableModel",
    "parse_timestamp",
]
