from datetime import datetime, timezone

import pytest

from scmbridge.infrastructure.error_handler import ValidationError
from scmbridge.models import (
    BranchEvent,
    Commit,
    EventKind,
    HookInput,
    ListOptions,
    Page,
    PushEvent,
    Rate,
    Reference,
    Repository,
    Signature,
    UnknownEvent,
    expand_ref,
    is_branch,
    is_tag,
    split_name,
    trim_ref,
)
from scmbridge.models.base import parse_timestamp


## Repository invariants
# ---------------------------

def test_repository_fills_full_name():
    repo = Repository(id="1", namespace="octocat", name="hello-world")
    assert repo.full_name == "octocat/hello-world"


def test_repository_rejects_mismatched_full_name():
    with pytest.raises(ValidationError):
        Repository(id="1", namespace="octocat", name="hello-world", full_name="someone/else")


def test_repository_requires_namespace_and_name():
    with pytest.raises(ValueError):
        Repository(id="1", namespace="", name="hello-world")


def test_entities_are_immutable():
    ref = Reference(name="master", path="refs/heads/master", sha="7fd1a60b01f91b314f59955a4e4d4e80d8edf11d")
    with pytest.raises(AttributeError):
        ref.sha = "0" * 40


def test_structural_equality():
    a = Reference(name="master", path="refs/heads/master", sha="7fd1a60")
    b = Reference(name="master", path="refs/heads/master", sha="7fd1a60")
    assert a == b


## Naming helpers
# ---------------------------

def test_split_name():
    assert split_name("octocat/hello-world") == ("octocat", "hello-world")
    assert split_name("group/subgroup/project") == ("group/subgroup", "project")


@pytest.mark.parametrize("value", ["", "/", "hello-world", "octocat/", "/hello-world"])
def test_split_name_rejects_malformed(value):
    with pytest.raises(ValidationError):
        split_name(value)


def test_ref_helpers():
    assert expand_ref("master", "refs/heads/") == "refs/heads/master"
    assert expand_ref("refs/tags/v1.0", "refs/heads/") == "refs/tags/v1.0"
    assert expand_ref("v1.0", "refs/tags") == "refs/tags/v1.0"
    assert trim_ref("refs/heads/feature/x") == "feature/x"
    assert trim_ref("refs/tags/v1.0") == "v1.0"
    assert trim_ref("refs/pull/1/head") == "refs/pull/1/head"
    assert is_branch("refs/heads/master") and not is_tag("refs/heads/master")
    assert is_tag("refs/tags/v1.0") and not is_branch("refs/tags/v1.0")


## Serialization
# ---------------------------

def test_parse_timestamp_handles_zulu_and_offsets():
    assert parse_timestamp("2012-03-06T23:06:50Z") == datetime(2012, 3, 6, 23, 6, 50, tzinfo=timezone.utc)
    assert parse_timestamp("2012-03-06T15:06:50-08:00") == datetime(2012, 3, 6, 23, 6, 50, tzinfo=timezone.utc)
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_parse_timestamp_accepts_epoch_seconds():
    assert parse_timestamp(1512076018) == datetime(2017, 11, 30, 21, 6, 58, tzinfo=timezone.utc)


def test_to_dict_serializes_nested_values():
    commit = Commit(
        sha="7fd1a60b01f91b314f59955a4e4d4e80d8edf11d",
        message="Update README",
        author=Signature(name="The Octocat", date=parse_timestamp("2012-03-06T23:06:50Z")),
    )
    data = commit.to_dict()
    assert data["author"]["date"] == "2012-03-06T23:06:50+00:00"
    assert data["committer"] == {"name": "", "email": "", "date": None, "login": "", "avatar": ""}


def test_event_to_dict_includes_discriminator():
    event = BranchEvent(ref=Reference(name="x", path="refs/heads/x", sha=""))
    assert event.to_dict()["kind"] == "branch"


## Options and metadata
# ---------------------------

def test_list_options_reject_negative_values():
    with pytest.raises(ValidationError):
        ListOptions(page=-1)
    with pytest.raises(ValidationError):
        ListOptions(size=-5)


def test_rate_zero_is_unknown():
    assert not Rate().is_known
    assert Rate(limit=60, remaining=0, reset=1512076018).is_known


def test_page_has_next():
    assert not Page().has_next
    assert Page(next=2).has_next
    assert Page(next_url="https://example.com/?after=abc").has_next


def test_hook_input_requires_target():
    with pytest.raises(ValidationError):
        HookInput(target="")


## Event union
# ---------------------------

def test_event_kind_is_fixed_per_variant():
    assert PushEvent().kind is EventKind.PUSH
    assert BranchEvent().kind is EventKind.BRANCH
    assert UnknownEvent(event_type="star").kind is EventKind.UNKNOWN


def test_event_kind_cannot_be_passed_in():
    with pytest.raises(TypeError):
        PushEvent(kind=EventKind.TAG)
