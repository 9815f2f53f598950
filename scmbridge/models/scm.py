"""
Canonical source-control entities for scmbridge.

Every driver normalizes its provider's JSON into these immutable value
objects, so logically equivalent data from two providers compares equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from ..infrastructure.error_handler import ValidationError
from .base import SerializableModel


BRANCH_PREFIX = "refs/heads/"
TAG_PREFIX = "refs/tags/"


@dataclass(frozen=True)
class Organization(SerializableModel):
    """An organization; identity is its provider-qualified name."""

    name: str
    avatar: str = ""


@dataclass(frozen=True)
class User(SerializableModel):
    """A provider account, as seen in webhooks and authorship."""

    login: str = ""
    name: str = ""
    email: str = ""
    avatar: str = ""


@dataclass(frozen=True)
class Perm(SerializableModel):
    """Permissions the authenticated user holds on a repository."""

    pull: bool = False
    push: bool = False
    admin: bool = False


@dataclass(frozen=True)
class Repository(SerializableModel):
    """Immutable repository snapshot. ``full_name`` is always ``namespace/name``."""

    id: str
    namespace: str
    name: str
    full_name: str = ""
    perm: Perm = field(default_factory=Perm)
    branch: str = ""
    private: bool = False
    archived: bool = False
    clone: str = ""
    clone_ssh: str = ""
    link: str = ""
    created: Optional[datetime] = None
    updated: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.namespace or not self.name:
            raise ValidationError("Repository namespace and name are required")

        expected = join_name(self.namespace, self.name)
        if not self.full_name:
            object.__setattr__(self, "full_name", expected)
        elif self.full_name != expected:
            raise ValidationError(
                f"Repository full name {self.full_name!r} does not match {expected!r}"
            )


@dataclass(frozen=True)
class Reference(SerializableModel):
    """A branch, tag or other git reference pointing at a full object id."""

    name: str
    path: str
    sha: str


@dataclass(frozen=True)
class Signature(SerializableModel):
    """Author or committer identity attached to a commit."""

    name: str = ""
    email: str = ""
    date: Optional[datetime] = None
    login: str = ""
    avatar: str = ""


@dataclass(frozen=True)
class Commit(SerializableModel):
    sha: str
    message: str = ""
    author: Signature = field(default_factory=Signature)
    committer: Signature = field(default_factory=Signature)
    link: str = ""


@dataclass(frozen=True)
class Change(SerializableModel):
    """One file entry of a diff."""

    path: str
    previous_path: str = ""
    added: bool = False
    renamed: bool = False
    deleted: bool = False
    sha: str = ""
    additions: int = 0
    deletions: int = 0
    changes: int = 0


@dataclass(frozen=True)
class Hook(SerializableModel):
    """A webhook registered on a repository."""

    id: str
    name: str = ""
    target: str = ""
    events: List[str] = field(default_factory=list)
    active: bool = False
    skip_verify: bool = False


@dataclass(frozen=True)
class HookInput(SerializableModel):
    """Parameters for registering a repository webhook."""

    target: str
    name: str = ""
    secret: str = ""
    events: List[str] = field(default_factory=lambda: ["push"])
    skip_verify: bool = False

    def __post_init__(self) -> None:
        if not self.target:
            raise ValidationError("Hook target URL is required")


def split_name(full_name: str) -> Tuple[str, str]:
    """Split ``namespace/name`` into its parts; nested namespaces are kept."""

    if not full_name or not full_name.strip("/"):
        raise ValidationError("Repository identifier is required")

    namespace, sep, name = full_name.strip("/").rpartition("/")
    if not sep or not namespace or not name:
        raise ValidationError(f"Invalid repository identifier: {full_name!r}")
    return namespace, name


def join_name(namespace: str, name: str) -> str:
    return f"{namespace}/{name}"


def expand_ref(name: str, prefix: str) -> str:
    """Qualify a short ref name with ``prefix`` unless already qualified."""

    prefix = prefix.rstrip("/") + "/"
    if name.startswith("refs/"):
        return name
    return prefix + name


def trim_ref(ref: str) -> str:
    """Strip the branch or tag prefix from a fully qualified ref."""

    for prefix in (BRANCH_PREFIX, TAG_PREFIX):
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def is_branch(ref: str) -> bool:
    return ref.startswith(BRANCH_PREFIX)


def is_tag(ref: str) -> bool:
    return ref.startswith(TAG_PREFIX)


__all__ = [
    "BRANCH_PREFIX",
    "TAG_PREFIX",
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
]
