"""
Canonical data models API surface for scmbridge.

This file re-exports model classes from domain-specific modules so callers
can write ``from scmbridge.models import X``.
"""

from .scm import (
    Organization,
    User,
    Perm,
    Repository,
    Reference,
    Signature,
    Commit,
    Change,
    Hook,
    HookInput,
    split_name,
    join_name,
    expand_ref,
    trim_ref,
    is_branch,
    is_tag,
)
from .response import (
    ListOptions,
    CommitListOptions,
    Page,
    Rate,
    Response,
)
from .webhook import (
    EventKind,
    Action,
    Issue,
    PullRequest,
    Comment,
    Event,
    PushEvent,
    BranchEvent,
    TagEvent,
    PullRequestEvent,
    IssueEvent,
    IssueCommentEvent,
    PingEvent,
    UnknownEvent,
)
from .config import ClientConfig

__all__ = [
    # SCM entities
    "Organization",
    "User",
    "Perm",
    "Repository",
    "Reference",
    "Signature",
    "Commit",
    "Change",
    "Hook",
    "HookInput",
    "split_name",
    "join_name",
    "expand_ref",
    "trim_ref",
    "is_branch",
    "is_tag",
    # Options and response metadata
    "ListOptions",
    "CommitListOptions",
    "Page",
    "Rate",
    "Response",
    # Webhook events
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
    # Config models
    "ClientConfig",
]
