"""
Pagination engine.

Providers signal "more results" in three incompatible ways: ``Link`` header
relations, bare page numbers (optionally with a total count), or not at
all. Every driver declares its scheme and hands the raw response metadata
to ``resolve_page``; the reconciliation rules live only here.
"""

import math
import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qs, urlparse

import httpx

from ..models.response import ListOptions, Page


TOTAL_COUNT_HEADER = "X-Total-Count"

_LINK_PATTERN = re.compile(r'<([^>]*)>\s*((?:;\s*[^;,]+)*)')
_REL_PATTERN = re.compile(r'rel\s*=\s*"?([^";]+)"?')


class PaginationScheme(Enum):
    """How a provider signals further pages."""

    LINK = "link"                # Link header with rel=next/prev/first/last
    PAGE_NUMBER = "page_number"  # page/size params, optional total count
    NONE = "none"                # everything comes back in one response


def to_query_params(
    options: Optional[ListOptions],
    page_param: str = "page",
    size_param: str = "per_page",
) -> Dict[str, Any]:
    """Map canonical options onto provider query parameters; zero values are omitted."""

    params: Dict[str, Any] = {}
    if options is None:
        return params
    if options.page:
        params[page_param] = options.page
    if options.size:
        params[size_param] = options.size
    return params


def parse_link_header(value: str) -> Dict[str, str]:
    """
    Parse an RFC 8288 ``Link`` header into ``{rel: url}``.

    Format: <https://api.github.com/...?page=2>; rel="next", <...>; rel="last"
    """

    links: Dict[str, str] = {}
    if not value:
        return links

    for match in _LINK_PATTERN.finditer(value):
        url, params = match.group(1).strip(), match.group(2)
        rel = _REL_PATTERN.search(params)
        if not rel:
            continue
        for name in rel.group(1).split():
            links.setdefault(name.lower(), url)
    return links


def _page_number(url: str) -> Optional[int]:
    values = parse_qs(urlparse(url).query).get("page")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


def page_from_links(links: Mapping[str, str]) -> Page:
    """Synthesize page numbers from link relations."""

    numbers = {rel: _page_number(url) for rel, url in links.items()}
    next_url = links.get("next") if "next" in links and numbers["next"] is None else None
    return Page(
        first=numbers.get("first"),
        next=numbers.get("next"),
        prev=numbers.get("prev", numbers.get("previous")),
        last=numbers.get("last"),
        next_url=next_url,
    )


def page_from_numbers(
    options: Optional[ListOptions],
    count: int,
    total: Optional[int],
    default_size: int,
) -> Page:
    """
    Derive page links for page-number providers.

    A total count wins over the short-page heuristic. Without one, a page
    holding exactly ``size`` items is assumed to have a successor.
    """

    page = options.page if options and options.page else 1
    size = options.size if options and options.size else default_size
    prev = page - 1 if page > 1 else None

    if total is not None:
        last = max(1, math.ceil(total / size)) if size else 1
        return Page(
            first=1,
            next=page + 1 if page < last else None,
            prev=prev,
            last=last,
        )

    return Page(
        first=1,
        next=page + 1 if size and count >= size else None,
        prev=prev,
    )


def _total_count(headers: httpx.Headers) -> Optional[int]:
    value = headers.get(TOTAL_COUNT_HEADER)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def resolve_page(
    scheme: PaginationScheme,
    options: Optional[ListOptions],
    headers: Mapping[str, str],
    count: int,
    default_size: int = 30,
) -> Page:
    """
    Reconcile one list response into a canonical ``Page``.

    Args:
        scheme: Pagination scheme declared by the driver
        options: Options the caller requested the page with
        headers: Raw response headers
        count: Number of items decoded from the response
        default_size: Provider page size used when ``options.size`` is zero

    Returns:
        Page with absent relations left as ``None``
    """
    if scheme is PaginationScheme.NONE:
        return Page()

    normalized = httpx.Headers(headers)
    if scheme is PaginationScheme.LINK:
        return page_from_links(parse_link_header(normalized.get("Link", "")))

    return page_from_numbers(options, count, _total_count(normalized), default_size)


__all__ = [
    "TOTAL_COUNT_HEADER",
    "PaginationScheme",
    "to_query_params",
    "parse_link_header",
    "page_from_links",
    "page_from_numbers",
    "resolve_page",
]
