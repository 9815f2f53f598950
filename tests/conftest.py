import hashlib
import hmac
import json
from pathlib import Path

import pytest


TESTDATA = Path(__file__).parent / "testdata"

# Response headers GitHub attaches to every API call
GITHUB_HEADERS = {
    "X-GitHub-Request-Id": "DD0E:6011:12F21A8:1926790:5A2064E2",
    "X-RateLimit-Limit": "60",
    "X-RateLimit-Remaining": "59",
    "X-RateLimit-Reset": "1512076018",
}

GITHUB_PAGE_HEADERS = {
    "Link": (
        '<https://api.github.com/resource?page=2>; rel="next", '
        '<https://api.github.com/resource?page=1>; rel="prev", '
        '<https://api.github.com/resource?page=1>; rel="first", '
        '<https://api.github.com/resource?page=5>; rel="last"'
    ),
}


@pytest.fixture
def github_headers():
    return dict(GITHUB_HEADERS)


@pytest.fixture
def github_page_headers():
    return {**GITHUB_HEADERS, **GITHUB_PAGE_HEADERS}


def _load(provider: str, name: str):
    return json.loads((TESTDATA / provider / name).read_text())


@pytest.fixture
def fixture_json():
    """Load a raw provider response: ``fixture_json("github", "commit.json")``."""
    return _load


@pytest.fixture
def fixture_bytes():
    """Raw request body of a fixture, exactly as a provider would sign it."""
    return lambda provider, name: (TESTDATA / provider / name).read_bytes()


@pytest.fixture
def golden_json():
    """Load the canonical decoding of a fixture."""
    return lambda provider, name: _load(provider, f"{name}.golden")


@pytest.fixture
def sign():
    """Produce a hex HMAC signature the way providers do."""

    def _sign(secret: str, body: bytes, digest: str = "sha256", prefix: str = "") -> str:
        mac = hmac.new(secret.encode(), body, getattr(hashlib, digest))
        return prefix + mac.hexdigest()

    return _sign
