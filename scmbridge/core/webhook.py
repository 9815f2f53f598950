"""
Webhook signature verification and decoding.

A payload moves from UNVERIFIED to VERIFIED (or VERIFIED_BY_POLICY for
providers that do not sign) before its body is decoded. A payload that
fails verification is REJECTED and never decoded.
"""

import dataclasses
import hashlib
import hmac
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import httpx

from ..infrastructure.error_handler import SignatureInvalidError, ValidationError
from ..infrastructure.logger import logger
from ..models.webhook import Event, UnknownEvent


Decoder = Callable[[Dict[str, Any]], Event]


class VerificationState(Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    VERIFIED_BY_POLICY = "verified_by_policy"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SignatureScheme:
    """One way a provider signs payloads: ``<prefix><hex hmac(secret, body)>``."""

    header: str
    digest: str = "sha256"
    prefix: str = ""

    def sign(self, secret: str, body: bytes) -> str:
        mac = hmac.new(secret.encode(), body, getattr(hashlib, self.digest))
        return self.prefix + mac.hexdigest()


@dataclass(frozen=True)
class WebhookSpec:
    """Header names and signing schemes of one provider, in preference order."""

    event_header: str
    delivery_header: str = ""
    schemes: Tuple[SignatureScheme, ...] = ()

    @property
    def signed(self) -> bool:
        return bool(self.schemes)


def _as_bytes(body: Union[bytes, str]) -> bytes:
    return body.encode() if isinstance(body, str) else body


def verify_signature(
    spec: WebhookSpec,
    headers: Mapping[str, str],
    body: Union[bytes, str],
    secret: Optional[str],
) -> VerificationState:
    """
    Check a payload signature against the shared secret.

    Returns:
        VERIFIED, or VERIFIED_BY_POLICY when the provider does not sign

    Raises:
        SignatureInvalidError: on a missing header, missing secret or mismatch
    """
    if not spec.signed:
        logger.debug(f"{spec.event_header}: provider does not sign payloads, skipping verification")
        return VerificationState.VERIFIED_BY_POLICY

    if not secret:
        raise SignatureInvalidError("no webhook secret configured")

    normalized = httpx.Headers(headers)
    for scheme in spec.schemes:
        supplied = normalized.get(scheme.header)
        if supplied is None:
            continue
        if scheme.prefix and not supplied.startswith(scheme.prefix):
            raise SignatureInvalidError(f"malformed {scheme.header} header")
        expected = scheme.sign(secret, _as_bytes(body))
        if not hmac.compare_digest(supplied.encode(), expected.encode()):
            raise SignatureInvalidError()
        return VerificationState.VERIFIED

    raise SignatureInvalidError("missing webhook signature header")


class WebhookParser:
    """
    Verify-then-decode pipeline for one provider.

    Decoders are keyed by the provider's event-type header value; types
    without a decoder become ``UnknownEvent``.
    """

    def __init__(self, spec: WebhookSpec, decoders: Mapping[str, Decoder]):
        self.spec = spec
        self.decoders = dict(decoders)

    def parse(
        self,
        headers: Mapping[str, str],
        body: Union[bytes, str],
        secret: Optional[str] = None,
    ) -> Event:
        normalized = httpx.Headers(headers)
        event_type = normalized.get(self.spec.event_header, "")
        if not event_type:
            raise ValidationError(f"missing {self.spec.event_header} header")
        delivery_id = normalized.get(self.spec.delivery_header, "") if self.spec.delivery_header else ""

        state = verify_signature(self.spec, normalized, body, secret)
        logger.debug(f"webhook {event_type} ({delivery_id or 'no delivery id'}): {state.value}")

        payload = json.loads(_as_bytes(body))
        if not isinstance(payload, dict):
            raise ValidationError(f"{event_type} payload must be a JSON object")

        decoder = self.decoders.get(event_type)
        if decoder is None:
            event: Event = UnknownEvent(event_type=event_type, payload=payload)
        else:
            try:
                event = decoder(payload)
            except KeyError as e:
                raise ValidationError(f"{event_type} payload is missing {e}", e)
        return dataclasses.replace(event, delivery_id=delivery_id)


__all__ = [
    "Decoder",
    "VerificationState",
    "SignatureScheme",
    "WebhookSpec",
    "verify_signature",
    "WebhookParser",
]
