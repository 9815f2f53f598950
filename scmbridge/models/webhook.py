"""
Canonical webhook events.

``Event`` is a closed tagged union: each variant fixes its ``kind``
discriminator, and anything a provider sends that we do not model becomes
an ``UnknownEvent`` carrying the raw payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .base import SerializableModel
from .scm import Commit, Reference, Repository, User


class EventKind(Enum):
    """Discriminator of the ``Event`` union."""

    PUSH = "push"
    BRANCH = "branch"
    TAG = "tag"
    PULL_REQUEST = "pull_request"
    ISSUE = "issue"
    ISSUE_COMMENT = "issue_comment"
    PING = "ping"
    UNKNOWN = "unknown"


class Action(Enum):
    """What happened to the subject of an event."""

    UNKNOWN = "unknown"
    CREATE = "created"
    UPDATE = "updated"
    DELETE = "deleted"
    OPEN = "opened"
    REOPEN = "reopened"
    CLOSE = "closed"
    SYNC = "synchronized"
    MERGE = "merged"
    LABEL = "labeled"
    UNLABEL = "unlabeled"
    EDIT = "edited"


@dataclass(frozen=True)
class Issue(SerializableModel):
    number: int
    title: str = ""
    body: str = ""
    link: str = ""
    closed: bool = False
    locked: bool = False
    labels: List[str] = field(default_factory=list)
    author: User = field(default_factory=User)
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


@dataclass(frozen=True)
class PullRequest(SerializableModel):
    number: int
    title: str = ""
    body: str = ""
    sha: str = ""
    ref: str = ""
    source: str = ""
    target: str = ""
    link: str = ""
    closed: bool = False
    merged: bool = False
    author: User = field(default_factory=User)
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


@dataclass(frozen=True)
class Comment(SerializableModel):
    id: int
    body: str = ""
    author: User = field(default_factory=User)
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


@dataclass(frozen=True)
class Event(SerializableModel):
    """Fields shared by every webhook event."""

    kind: EventKind = field(default=EventKind.UNKNOWN, init=False)
    sender: User = field(default_factory=User)
    repo: Optional[Repository] = None
    delivery_id: str = ""


@dataclass(frozen=True)
class PushEvent(Event):
    kind: EventKind = field(default=EventKind.PUSH, init=False)
    ref: str = ""
    base_ref: str = ""
    before: str = ""
    after: str = ""
    compare: str = ""
    commits: List[Commit] = field(default_factory=list)


@dataclass(frozen=True)
class BranchEvent(Event):
    kind: EventKind = field(default=EventKind.BRANCH, init=False)
    ref: Optional[Reference] = None
    action: Action = Action.UNKNOWN


@dataclass(frozen=True)
class TagEvent(Event):
    kind: EventKind = field(default=EventKind.TAG, init=False)
    ref: Optional[Reference] = None
    action: Action = Action.UNKNOWN


@dataclass(frozen=True)
class PullRequestEvent(Event):
    kind: EventKind = field(default=EventKind.PULL_REQUEST, init=False)
    action: Action = Action.UNKNOWN
    pull_request: Optional[PullRequest] = None


@dataclass(frozen=True)
class IssueEvent(Event):
    kind: EventKind = field(default=EventKind.ISSUE, init=False)
    action: Action = Action.UNKNOWN
    issue: Optional[Issue] = None


@dataclass(frozen=True)
class IssueCommentEvent(Event):
    kind: EventKind = field(default=EventKind.ISSUE_COMMENT, init=False)
    action: Action = Action.UNKNOWN
    issue: Optional[Issue] = None
    comment: Optional[Comment] = None


@dataclass(frozen=True)
class PingEvent(Event):
    kind: EventKind = field(default=EventKind.PING, init=False)
    zen: str = ""
    hook_id: str = ""


@dataclass(frozen=True)
class UnknownEvent(Event):
    """An event type the provider sent that has no canonical variant."""

    kind: EventKind = field(default=EventKind.UNKNOWN, init=False)
    event_type: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)


__all__ = [
    "EventKind",
    "Action",
    "Issue",
    "PullRequest",
    "Comment",
    "Event",
    "PushEvent",
    "BranchEvent",
    "TagEvent",
    "PullRequestEvent",
    "IssueEvent",
    "IssueCommentEvent",
    "PingEvent",
    "UnknownEvent",
]
