"""
Gogs driver.

Gogs shares Gitea's JSON shapes but returns whole collections in one
response and lacks the tag, commit-listing and diff endpoints.
"""

from typing import List, Optional, Tuple

from ..core.pagination import PaginationScheme
from ..core.webhook import SignatureScheme, WebhookSpec
from ..infrastructure.error_handler import NotSupportedError, handle_api_error
from ..models.response import CommitListOptions, ListOptions, Response
from ..models.scm import Commit, Reference
from .base import Driver
from .gitea import (
    GiteaGitService,
    GiteaOrganizationService,
    GiteaRepositoryService,
    GiteaWebhookService,
)


class GogsGitService(GiteaGitService):

    commit_path = "repos/{repo}/commits/{sha}"

    @handle_api_error("git.find_tag")
    async def find_tag(self, repo: str, name: str) -> Tuple[Reference, Response]:
        raise NotSupportedError()

    @handle_api_error("git.list_commits")
    async def list_commits(
        self, repo: str, opts: Optional[CommitListOptions] = None
    ) -> Tuple[List[Commit], Response]:
        raise NotSupportedError()

    @handle_api_error("git.list_tags")
    async def list_tags(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Reference], Response]:
        raise NotSupportedError()

    @handle_api_error("git.create_ref")
    async def create_ref(self, repo: str, ref: str, sha: str) -> Tuple[Reference, Response]:
        raise NotSupportedError()


class GogsRepositoryService(GiteaRepositoryService):

    hook_type = "gogs"


class GogsDriver(Driver):
    """Driver for self-hosted Gogs servers; ``base_url`` is required."""

    name = "gogs"
    default_base_url = ""
    api_prefix = "/api/v1"

    pagination = PaginationScheme.NONE
    rate_headers = None
    webhook_spec = WebhookSpec(
        event_header="X-Gogs-Event",
        delivery_header="X-Gogs-Delivery",
        schemes=(SignatureScheme("X-Gogs-Signature", "sha256"),),
    )

    git_service = GogsGitService
    organization_service = GiteaOrganizationService
    repository_service = GogsRepositoryService
    webhook_service = GiteaWebhookService


__all__ = [
    "GogsDriver",
    "GogsGitService",
    "GogsRepositoryService",
]
