"""
Provider-independent engines: pagination, rate metadata, webhooks.
"""

from .pagination import PaginationScheme, resolve_page, to_query_params
from .rate import RateHeaders, extract_rate
from .webhook import (
    SignatureScheme,
    VerificationState,
    WebhookParser,
    WebhookSpec,
    verify_signature,
)

__all__ = [
    "PaginationScheme",
    "resolve_page",
    "to_query_params",
    "RateHeaders",
    "extract_rate",
    "SignatureScheme",
    "VerificationState",
    "WebhookParser",
    "WebhookSpec",
    "verify_signature",
]
