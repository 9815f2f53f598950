import asyncio

import httpx
import pytest

from scmbridge.infrastructure.error_handler import (
    ApiError,
    NotFoundError,
    NotSupportedError,
    ScmError,
    SignatureInvalidError,
    UnauthorizedError,
    ValidationError,
    handle_api_error,
    raise_for_status,
)


# ---- Helpers ---------------------------------------------------------------

def make_response(status: int, **kwargs) -> httpx.Response:
    request = httpx.Request("GET", "https://api.github.com/repos/octocat/Hello-World")
    return httpx.Response(status, request=request, **kwargs)


class FakeService:

    @handle_api_error("git.find_commit")
    async def find_commit(self, repo, sha):
        raise NotFoundError("Not Found")

    @handle_api_error("git.find_tag")
    async def find_tag(self, repo, name):
        raise NotSupportedError()

    @handle_api_error("repositories.find")
    async def find(self, repo):
        raise httpx.ConnectError("connection refused")

    @handle_api_error("repositories.list")
    async def slow(self):
        raise asyncio.CancelledError()

    @handle_api_error("git.get_default_branch")
    async def nested(self, repo):
        await self.find_commit(repo, "7fd1a60")


# ---- Exception classes -----------------------------------------------------

def test_scm_error_message_and_original():
    original = ValueError("boom")
    err = ScmError("failed", original)
    assert err.message == "failed"
    assert err.original_error is original
    assert "failed" in str(err)
    assert "Original: boom" in str(err)


def test_scm_error_includes_operation_context():
    err = NotFoundError("Not Found", operation="git.find_commit", identifier="octocat/Hello-World")
    assert str(err) == "git.find_commit octocat/Hello-World: Not Found"


@pytest.mark.parametrize("exc_cls, default", [
    (NotSupportedError, "operation not supported"),
    (SignatureInvalidError, "invalid webhook signature"),
])
def test_default_messages(exc_cls, default):
    assert exc_cls().message == default


def test_validation_error_is_value_error():
    assert issubclass(ValidationError, ValueError)
    assert issubclass(ValidationError, ScmError)


# ---- raise_for_status ------------------------------------------------------

def test_success_passes():
    raise_for_status(make_response(200, json={}))
    raise_for_status(make_response(204))


@pytest.mark.parametrize("status, expected", [
    (404, NotFoundError),
    (401, UnauthorizedError),
    (403, ApiError),
    (422, ApiError),
    (500, ApiError),
])
def test_status_mapping(status, expected):
    with pytest.raises(expected):
        raise_for_status(make_response(status, json={"message": "nope"}))


def test_provider_message_is_kept():
    with pytest.raises(ApiError) as exc_info:
        raise_for_status(make_response(422, json={"message": "Reference already exists"}))
    assert exc_info.value.message == "Reference already exists"
    assert exc_info.value.status == 422


def test_non_json_body_falls_back_to_text():
    with pytest.raises(ApiError) as exc_info:
        raise_for_status(make_response(502, text="upstream timed out"))
    assert exc_info.value.message == "upstream timed out"


# ---- handle_api_error decorator -------------------------------------------

@pytest.mark.asyncio
async def test_decorator_stamps_operation_and_identifier():
    with pytest.raises(NotFoundError) as exc_info:
        await FakeService().find_commit("octocat/Hello-World", "7fd1a60")

    assert exc_info.value.operation == "git.find_commit"
    assert exc_info.value.identifier == "octocat/Hello-World"


@pytest.mark.asyncio
async def test_decorator_keeps_innermost_operation():
    """Scenario: a failing sub-call keeps its own operation name"""
    with pytest.raises(NotFoundError) as exc_info:
        await FakeService().nested("octocat/Hello-World")

    assert exc_info.value.operation == "git.find_commit"


@pytest.mark.asyncio
async def test_not_supported_is_logged_at_debug(monkeypatch):
    from scmbridge.infrastructure import error_handler as eh

    calls = []
    monkeypatch.setattr(eh.logger, "debug", lambda msg: calls.append(("debug", msg)))
    monkeypatch.setattr(eh.logger, "warning", lambda msg: calls.append(("warning", msg)))

    with pytest.raises(NotSupportedError):
        await FakeService().find_tag("octocat/Hello-World", "v0.1")

    assert calls == [("debug", "git.find_tag octocat/Hello-World: operation not supported")]


@pytest.mark.asyncio
async def test_transport_errors_are_not_wrapped():
    with pytest.raises(httpx.ConnectError):
        await FakeService().find("octocat/Hello-World")


@pytest.mark.asyncio
async def test_cancellation_passes_through():
    with pytest.raises(asyncio.CancelledError):
        await FakeService().slow()
