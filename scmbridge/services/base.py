"""
Driver contract shared by every provider.

A driver bundles one implementation of each capability group (git,
organizations, repositories, webhooks) plus the provider traits the core
needs: pagination scheme, rate-limit headers, webhook signing scheme.
Operations return ``(result, Response)`` and raise on failure; a provider
without an equivalent endpoint raises ``NotSupportedError``.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union
from urllib.parse import quote

import httpx

from ..core.pagination import PaginationScheme, resolve_page, to_query_params
from ..core.rate import RateHeaders, extract_rate
from ..core.webhook import WebhookParser, WebhookSpec
from ..infrastructure.error_handler import (
    NotFoundError,
    ValidationError,
    handle_api_error,
    raise_for_status,
)
from ..infrastructure.logger import logger
from ..infrastructure.transport import Transport
from ..models.config import ClientConfig
from ..models.response import CommitListOptions, ListOptions, Page, Response
from ..models.scm import (
    Change,
    Commit,
    Hook,
    HookInput,
    Organization,
    Reference,
    Repository,
)
from ..models.webhook import Event


def require(value: str, what: str) -> str:
    """Reject empty identifiers before anything goes over the wire."""

    if not value or not value.strip():
        raise ValidationError(f"{what} is required")
    return value


def segment(value: str, safe: str = "") -> str:
    """
    Percent-encode a caller-supplied value for use inside a request path.

    Git allows ``#``, ``%`` and ``?`` in ref names; left raw they would end
    the path early. Pass ``safe="/"`` for branch and tag names, which
    providers accept with embedded slashes.
    """
    return quote(value, safe=safe)


class Service:
    """Base for one capability group bound to its driver."""

    def __init__(self, driver: "Driver"):
        self.driver = driver


class GitService(Service, ABC):
    """Commits, branches, tags, references and diffs."""

    @abstractmethod
    async def find_commit(self, repo: str, sha: str) -> Tuple[Commit, Response]:
        ...

    @abstractmethod
    async def find_branch(self, repo: str, name: str) -> Tuple[Reference, Response]:
        ...

    @abstractmethod
    async def find_tag(self, repo: str, name: str) -> Tuple[Reference, Response]:
        ...

    @abstractmethod
    async def list_commits(
        self, repo: str, opts: Optional[CommitListOptions] = None
    ) -> Tuple[List[Commit], Response]:
        ...

    @abstractmethod
    async def list_branches(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Reference], Response]:
        ...

    @abstractmethod
    async def list_tags(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Reference], Response]:
        ...

    @abstractmethod
    async def list_changes(
        self, repo: str, sha: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Change], Response]:
        ...

    @abstractmethod
    async def compare_commits(
        self, repo: str, base: str, head: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Change], Response]:
        """Changes needed to go from ``base`` to ``head``; order matters."""

    @abstractmethod
    async def create_ref(self, repo: str, ref: str, sha: str) -> Tuple[Reference, Response]:
        ...

    @handle_api_error("git.get_default_branch")
    async def get_default_branch(self, repo: str) -> Tuple[Reference, Response]:
        """
        Resolve the repository's default branch to a reference.

        Two dependent calls: find the repository to learn the branch name,
        then find that branch. Either failure propagates as raised. A
        repository that reports no default branch (nothing pushed yet)
        raises ``NotFoundError``.
        """
        repository, _ = await self.driver.repositories.find(repo)
        if not repository.branch:
            raise NotFoundError("repository has no default branch")
        return await self.find_branch(repo, repository.branch)


class OrganizationService(Service, ABC):

    @abstractmethod
    async def find(self, name: str) -> Tuple[Organization, Response]:
        ...

    @abstractmethod
    async def list(self, opts: Optional[ListOptions] = None) -> Tuple[List[Organization], Response]:
        ...


class RepositoryService(Service, ABC):

    @abstractmethod
    async def find(self, repo: str) -> Tuple[Repository, Response]:
        ...

    @abstractmethod
    async def list(self, opts: Optional[ListOptions] = None) -> Tuple[List[Repository], Response]:
        ...

    @abstractmethod
    async def list_hooks(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Hook], Response]:
        ...

    @abstractmethod
    async def create_hook(self, repo: str, hook: HookInput) -> Tuple[Hook, Response]:
        ...

    @abstractmethod
    async def delete_hook(self, repo: str, hook_id: str) -> Response:
        ...


class WebhookService(Service):
    """Verifies and decodes inbound webhooks using the driver's decoder table."""

    def __init__(self, driver: "Driver"):
        super().__init__(driver)
        self.parser = WebhookParser(driver.webhook_spec, self.decoders())

    def decoders(self) -> Dict[str, Any]:
        return {}

    def parse(
        self,
        headers: Mapping[str, str],
        body: Union[bytes, str],
        secret: Optional[str] = None,
    ) -> Event:
        return self.parser.parse(headers, body, secret)


class Driver:
    """
    One provider adapter.

    Subclasses set the provider traits and the service classes; the
    request helper below applies them uniformly.
    """

    name: ClassVar[str] = ""
    default_base_url: ClassVar[str] = ""
    api_prefix: ClassVar[str] = ""

    pagination: ClassVar[PaginationScheme] = PaginationScheme.NONE
    page_param: ClassVar[str] = "page"
    size_param: ClassVar[str] = "per_page"
    rate_headers: ClassVar[Optional[RateHeaders]] = None
    request_id_header: ClassVar[str] = ""
    webhook_spec: ClassVar[WebhookSpec]

    git_service: ClassVar[Type[GitService]]
    organization_service: ClassVar[Type[OrganizationService]]
    repository_service: ClassVar[Type[RepositoryService]]
    webhook_service: ClassVar[Type[WebhookService]] = WebhookService

    def __init__(self, config: ClientConfig, transport: Transport):
        self.config = config
        self.transport = transport
        self.base_url = (config.base_url or self.default_base_url).rstrip("/")
        if not self.base_url:
            raise ValidationError(f"{self.name} requires a base_url")

        self.git = self.git_service(self)
        self.organizations = self.organization_service(self)
        self.repositories = self.repository_service(self)
        self.webhooks = self.webhook_service(self)

    def auth_headers(self) -> Dict[str, str]:
        if not self.config.token:
            return {}
        return {"Authorization": f"token {self.config.token}"}

    def url(self, path: str) -> str:
        return f"{self.base_url}{self.api_prefix}/{path.lstrip('/')}"

    def list_params(self, opts: Optional[ListOptions]) -> Dict[str, Any]:
        if self.pagination is PaginationScheme.NONE:
            return {}
        return to_query_params(opts, self.page_param, self.size_param)

    def build_response(
        self,
        response: httpx.Response,
        page: Optional[Page] = None,
    ) -> Response:
        headers = response.headers
        return Response(
            status=response.status_code,
            headers=dict(headers),
            page=page or Page(),
            rate=extract_rate(headers, self.rate_headers),
            request_id=headers.get(self.request_id_header, "") if self.request_id_header else "",
        )

    async def do(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        options: Optional[ListOptions] = None,
        paginated: bool = False,
    ) -> Tuple[Any, Response]:
        """
        Perform one provider call and decode its JSON body.

        Args:
            method: HTTP method
            path: Path below the provider API root
            params: Extra query parameters
            json: Request body
            options: Canonical list options, mapped onto query parameters
            paginated: Whether to reconcile pagination metadata

        Returns:
            Tuple of (decoded body or None, Response metadata)
        """
        query = dict(params or {})
        if paginated:
            query.update(self.list_params(options))

        headers = {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
            **self.auth_headers(),
        }
        response = await self.transport.request(
            method, self.url(path), params=query or None, json=json, headers=headers
        )
        raise_for_status(response)

        data = response.json() if response.content else None
        page = None
        if paginated:
            count = len(data) if isinstance(data, list) else 0
            page = resolve_page(
                self.pagination,
                options,
                response.headers,
                count,
                self.config.default_page_size,
            )
        meta = self.build_response(response, page)
        if meta.rate.is_known and meta.rate.remaining == 0:
            logger.warning(f"{self.name}: rate limit exhausted, resets at {meta.rate.reset}")
        return data, meta


__all__ = [
    "require",
    "segment",
    "Service",
    "GitService",
    "OrganizationService",
    "RepositoryService",
    "WebhookService",
    "Driver",
]
