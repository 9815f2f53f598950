"""
HTTP transport boundary.

The drivers never open connections themselves; they hand a request to a
``Transport`` and get an ``httpx.Response`` back. The default transport
wraps ``httpx.AsyncClient``, which is safe to share between tasks.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from .logger import logger


class Transport(ABC):
    """Perform one HTTP request and return the raw response."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""


class HttpxTransport(Transport):
    """Transport backed by a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {url} params={params or {}}")
        response = await self.client.request(
            method, url, params=params, json=json, headers=headers
        )
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


__all__ = [
    "Transport",
    "HttpxTransport",
]
