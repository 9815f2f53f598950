from unittest.mock import MagicMock, patch

import pytest

from scmbridge import Client, ClientConfig
from scmbridge.infrastructure.error_handler import SignatureInvalidError, ValidationError
from scmbridge.models import (
    Action,
    BranchEvent,
    EventKind,
    IssueCommentEvent,
    PingEvent,
    PullRequestEvent,
    PushEvent,
    TagEvent,
    UnknownEvent,
)

SECRET = "It's a Secret to Everybody"
DELIVERY = "72d3162e-cc78-11e3-81ab-4c9367dc0958"


@pytest.fixture
def github():
    return Client("github").webhooks


@pytest.fixture
def gitea():
    return Client("gitea").webhooks


@pytest.fixture
def gogs():
    return Client("gogs", ClientConfig(base_url="https://try.gogs.io")).webhooks


def github_headers(event, body, sign):
    return {
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": DELIVERY,
        "X-Hub-Signature-256": sign(SECRET, body, "sha256", "sha256="),
    }


## GitHub
# ---------------------------

def test_github_push(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_push.json")

    event = github.parse(github_headers("push", body, sign), body, SECRET)

    assert isinstance(event, PushEvent)
    assert event.kind is EventKind.PUSH
    assert event.delivery_id == DELIVERY
    assert event.ref == "refs/heads/master"
    assert event.before == "553c2077f0edc3d5dc5d17262f6aa498e69d6f8e"
    assert event.after == "7fd1a60b01f91b314f59955a4e4d4e80d8edf11d"
    assert [c.sha for c in event.commits] == ["7fd1a60b01f91b314f59955a4e4d4e80d8edf11d"]
    assert event.repo.full_name == "octocat/Hello-World"
    assert event.sender.login == "octocat"


def test_github_legacy_sha1_signature(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_push.json")
    headers = {
        "X-GitHub-Event": "push",
        "X-Hub-Signature": sign(SECRET, body, "sha1", "sha1="),
    }

    event = github.parse(headers, body, SECRET)

    assert event.kind is EventKind.PUSH
    assert event.delivery_id == ""


def test_github_merged_pull_request(github, fixture_bytes, sign):
    """Scenario: a closed pull request that was merged reports the merge"""
    body = fixture_bytes("github", "webhook_pull_request.json")

    event = github.parse(github_headers("pull_request", body, sign), body, SECRET)

    assert isinstance(event, PullRequestEvent)
    assert event.action is Action.MERGE
    assert event.pull_request.number == 1
    assert event.pull_request.merged
    assert event.pull_request.closed
    assert event.pull_request.ref == "refs/pull/1/head"
    assert event.pull_request.source == "changes"
    assert event.pull_request.target == "master"


def test_github_issue_comment(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_issue_comment.json")

    event = github.parse(github_headers("issue_comment", body, sign), body, SECRET)

    assert isinstance(event, IssueCommentEvent)
    assert event.action is Action.CREATE
    assert event.issue.number == 2
    assert event.issue.labels == ["bug"]
    assert event.comment.id == 99262140
    assert event.comment.body.startswith("You are totally right!")


def test_github_tag_creation(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_create.json")

    event = github.parse(github_headers("create", body, sign), body, SECRET)

    assert isinstance(event, TagEvent)
    assert event.action is Action.CREATE
    assert event.ref.name == "v1.0.0"
    assert event.ref.path == "refs/tags/v1.0.0"


def test_github_ping(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_ping.json")

    event = github.parse(github_headers("ping", body, sign), body, SECRET)

    assert isinstance(event, PingEvent)
    assert event.zen == "Keep it logically awesome."
    assert event.hook_id == "12345678"


def test_github_unmodelled_event(github, sign):
    body = b'{"action": "started", "sender": {"login": "octocat"}}'

    event = github.parse(github_headers("watch", body, sign), body, SECRET)

    assert isinstance(event, UnknownEvent)
    assert event.event_type == "watch"
    assert event.payload["action"] == "started"
    assert event.delivery_id == DELIVERY


def test_github_tampered_body_is_rejected_without_decoding(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_push.json")
    headers = github_headers("push", body, sign)

    decoder = MagicMock()
    with patch.dict(github.parser.decoders, {"push": decoder}):
        with pytest.raises(SignatureInvalidError):
            github.parse(headers, body.replace(b"master", b"main"), SECRET)

    decoder.assert_not_called()


def test_github_wrong_secret_is_rejected(github, fixture_bytes, sign):
    body = fixture_bytes("github", "webhook_push.json")

    with pytest.raises(SignatureInvalidError):
        github.parse(github_headers("push", body, sign), body, "not the secret")


def test_github_pull_request_without_pull_request_object(github, sign):
    body = b'{"action": "opened", "number": 1}'

    with pytest.raises(ValidationError) as exc_info:
        github.parse(github_headers("pull_request", body, sign), body, SECRET)

    assert "pull_request" in str(exc_info.value)


def test_github_signed_array_body_is_validation_error(github, sign):
    body = b"[]"

    with pytest.raises(ValidationError):
        github.parse(github_headers("push", body, sign), body, SECRET)


## Gitea and Gogs
# ---------------------------

def test_gitea_push(gitea, fixture_bytes, sign):
    body = fixture_bytes("gitea", "webhook_push.json")
    headers = {
        "X-Gitea-Event": "push",
        "X-Gitea-Delivery": DELIVERY,
        "X-Gitea-Signature": sign(SECRET, body),
    }

    event = gitea.parse(headers, body, SECRET)

    assert isinstance(event, PushEvent)
    assert event.after == "c43399cad8766ee521b873a32c1652407c5a4630"
    assert event.compare.startswith("https://try.gitea.io/go-gitea/gitea/compare/")
    assert event.commits[0].message == "Fix the README links\n"
    assert event.repo.full_name == "go-gitea/gitea"
    assert event.delivery_id == DELIVERY


def test_gitea_branch_creation(gitea, fixture_bytes, sign):
    body = fixture_bytes("gitea", "webhook_create.json")
    headers = {"X-Gitea-Event": "create", "X-Gitea-Signature": sign(SECRET, body)}

    event = gitea.parse(headers, body, SECRET)

    assert isinstance(event, BranchEvent)
    assert event.action is Action.CREATE
    assert event.ref.path == "refs/heads/feature"
    assert event.ref.sha == "c43399cad8766ee521b873a32c1652407c5a4630"


def test_gitea_missing_secret_fails_closed(gitea, fixture_bytes, sign):
    body = fixture_bytes("gitea", "webhook_push.json")
    headers = {"X-Gitea-Event": "push", "X-Gitea-Signature": sign(SECRET, body)}

    with pytest.raises(SignatureInvalidError):
        gitea.parse(headers, body)


def test_gogs_push_uses_gogs_headers(gogs, fixture_bytes, sign):
    body = fixture_bytes("gitea", "webhook_push.json")
    headers = {
        "X-Gogs-Event": "push",
        "X-Gogs-Delivery": DELIVERY,
        "X-Gogs-Signature": sign(SECRET, body),
    }

    event = gogs.parse(headers, body, SECRET)

    assert event.kind is EventKind.PUSH
    assert event.delivery_id == DELIVERY


def test_gogs_rejects_gitea_signature_header(gogs, fixture_bytes, sign):
    body = fixture_bytes("gitea", "webhook_push.json")
    headers = {"X-Gogs-Event": "push", "X-Gitea-Signature": sign(SECRET, body)}

    with pytest.raises(SignatureInvalidError):
        gogs.parse(headers, body, SECRET)
