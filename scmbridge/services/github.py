"""
GitHub driver.

Link-header pagination, ``X-RateLimit-*`` quota headers and
``X-Hub-Signature-256`` signed webhooks.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..core.pagination import PaginationScheme
from ..core.rate import GITHUB_RATE_HEADERS
from ..core.webhook import SignatureScheme, WebhookSpec
from ..infrastructure.error_handler import NotSupportedError, handle_api_error
from ..models.response import CommitListOptions, ListOptions, Response
from ..models.scm import (
    BRANCH_PREFIX,
    TAG_PREFIX,
    Change,
    Commit,
    Hook,
    HookInput,
    Organization,
    Perm,
    Reference,
    Repository,
    Signature,
    User,
    expand_ref,
    split_name,
    trim_ref,
)
from ..models.base import parse_timestamp
from ..models.webhook import (
    Action,
    BranchEvent,
    Comment,
    Event,
    Issue,
    IssueCommentEvent,
    IssueEvent,
    PingEvent,
    PullRequest,
    PullRequestEvent,
    PushEvent,
    TagEvent,
)
from .base import (
    Driver,
    GitService,
    OrganizationService,
    RepositoryService,
    WebhookService,
    require,
    segment,
)


####
##      CONVERTERS
#####
def convert_user(data: Optional[Dict[str, Any]]) -> User:
    data = data or {}
    return User(
        login=data.get("login") or "",
        name=data.get("name") or "",
        email=data.get("email") or "",
        avatar=data.get("avatar_url") or "",
    )


def convert_repository(data: Dict[str, Any]) -> Repository:
    owner = data.get("owner") or {}
    perms = data.get("permissions") or {}
    return Repository(
        id=str(data["id"]),
        namespace=owner.get("login") or owner.get("name") or "",
        name=data["name"],
        full_name=data.get("full_name") or "",
        perm=Perm(
            pull=bool(perms.get("pull")),
            push=bool(perms.get("push")),
            admin=bool(perms.get("admin")),
        ),
        branch=data.get("default_branch") or "",
        private=bool(data.get("private")),
        archived=bool(data.get("archived")),
        clone=data.get("clone_url") or "",
        clone_ssh=data.get("ssh_url") or "",
        link=data.get("html_url") or "",
        created=parse_timestamp(data.get("created_at")),
        updated=parse_timestamp(data.get("updated_at")),
    )


def convert_signature(data: Optional[Dict[str, Any]], account: Optional[Dict[str, Any]]) -> Signature:
    data = data or {}
    account = account or {}
    return Signature(
        name=data.get("name") or "",
        email=data.get("email") or "",
        date=parse_timestamp(data.get("date")),
        login=account.get("login") or "",
        avatar=account.get("avatar_url") or "",
    )


def convert_commit(data: Dict[str, Any]) -> Commit:
    inner = data.get("commit") or {}
    return Commit(
        sha=data["sha"],
        message=inner.get("message") or "",
        author=convert_signature(inner.get("author"), data.get("author")),
        committer=convert_signature(inner.get("committer"), data.get("committer")),
        link=data.get("html_url") or "",
    )


def convert_branch(data: Dict[str, Any]) -> Reference:
    return Reference(
        name=data["name"],
        path=expand_ref(data["name"], BRANCH_PREFIX),
        sha=(data.get("commit") or {}).get("sha") or "",
    )


def convert_tag(data: Dict[str, Any]) -> Reference:
    return Reference(
        name=data["name"],
        path=expand_ref(data["name"], TAG_PREFIX),
        sha=(data.get("commit") or {}).get("sha") or "",
    )


def convert_ref(data: Dict[str, Any]) -> Reference:
    path = data["ref"]
    return Reference(
        name=trim_ref(path),
        path=path,
        sha=(data.get("object") or {}).get("sha") or "",
    )


def convert_change(data: Dict[str, Any]) -> Change:
    status = data.get("status")
    return Change(
        path=data["filename"],
        previous_path=data.get("previous_filename") or "",
        added=status == "added",
        renamed=status == "renamed",
        deleted=status == "removed",
        sha=data.get("sha") or "",
        additions=data.get("additions", 0),
        deletions=data.get("deletions", 0),
        changes=data.get("changes", 0),
    )


def convert_hook(data: Dict[str, Any]) -> Hook:
    config = data.get("config") or {}
    return Hook(
        id=str(data["id"]),
        name=data.get("name") or "",
        target=config.get("url") or "",
        events=list(data.get("events") or []),
        active=bool(data.get("active")),
        skip_verify=str(config.get("insecure_ssl", "0")) == "1",
    )


def convert_organization(data: Dict[str, Any]) -> Organization:
    return Organization(name=data["login"], avatar=data.get("avatar_url") or "")


####
##      SERVICES
#####
class GitHubGitService(GitService):

    @handle_api_error("git.find_commit")
    async def find_commit(self, repo: str, sha: str) -> Tuple[Commit, Response]:
        split_name(repo)
        require(sha, "commit sha")
        data, res = await self.driver.do("GET", f"repos/{repo}/commits/{segment(sha)}")
        return convert_commit(data), res

    @handle_api_error("git.find_branch")
    async def find_branch(self, repo: str, name: str) -> Tuple[Reference, Response]:
        split_name(repo)
        require(name, "branch name")
        data, res = await self.driver.do("GET", f"repos/{repo}/branches/{segment(name, safe='/')}")
        return convert_branch(data), res

    @handle_api_error("git.find_tag")
    async def find_tag(self, repo: str, name: str) -> Tuple[Reference, Response]:
        raise NotSupportedError()

    @handle_api_error("git.list_commits")
    async def list_commits(
        self, repo: str, opts: Optional[CommitListOptions] = None
    ) -> Tuple[List[Commit], Response]:
        split_name(repo)
        params = {}
        if opts and opts.ref:
            params["sha"] = opts.ref
        if opts and opts.path:
            params["path"] = opts.path
        data, res = await self.driver.do(
            "GET", f"repos/{repo}/commits", params=params, options=opts, paginated=True
        )
        return [convert_commit(item) for item in data], res

    @handle_api_error("git.list_branches")
    async def list_branches(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Reference], Response]:
        split_name(repo)
        data, res = await self.driver.do(
            "GET", f"repos/{repo}/branches", options=opts, paginated=True
        )
        return [convert_branch(item) for item in data], res

    @handle_api_error("git.list_tags")
    async def list_tags(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Reference], Response]:
        split_name(repo)
        data, res = await self.driver.do(
            "GET", f"repos/{repo}/tags", options=opts, paginated=True
        )
        return [convert_tag(item) for item in data], res

    @handle_api_error("git.list_changes")
    async def list_changes(
        self, repo: str, sha: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Change], Response]:
        split_name(repo)
        require(sha, "commit sha")
        data, res = await self.driver.do(
            "GET", f"repos/{repo}/commits/{segment(sha)}", options=opts, paginated=True
        )
        return [convert_change(item) for item in data.get("files") or []], res

    @handle_api_error("git.compare_commits")
    async def compare_commits(
        self, repo: str, base: str, head: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Change], Response]:
        split_name(repo)
        require(base, "base commit")
        require(head, "head commit")
        span = f"{segment(base, safe='/')}...{segment(head, safe='/')}"
        data, res = await self.driver.do(
            "GET", f"repos/{repo}/compare/{span}", options=opts, paginated=True
        )
        return [convert_change(item) for item in data.get("files") or []], res

    @handle_api_error("git.create_ref")
    async def create_ref(self, repo: str, ref: str, sha: str) -> Tuple[Reference, Response]:
        split_name(repo)
        require(ref, "reference")
        require(sha, "commit sha")
        body = {"ref": expand_ref(ref, BRANCH_PREFIX), "sha": sha}
        data, res = await self.driver.do("POST", f"repos/{repo}/git/refs", json=body)
        return convert_ref(data), res


class GitHubOrganizationService(OrganizationService):

    @handle_api_error("organizations.find")
    async def find(self, name: str) -> Tuple[Organization, Response]:
        require(name, "organization name")
        data, res = await self.driver.do("GET", f"orgs/{segment(name)}")
        return convert_organization(data), res

    @handle_api_error("organizations.list")
    async def list(self, opts: Optional[ListOptions] = None) -> Tuple[List[Organization], Response]:
        data, res = await self.driver.do("GET", "user/orgs", options=opts, paginated=True)
        return [convert_organization(item) for item in data], res


class GitHubRepositoryService(RepositoryService):

    @handle_api_error("repositories.find")
    async def find(self, repo: str) -> Tuple[Repository, Response]:
        split_name(repo)
        data, res = await self.driver.do("GET", f"repos/{repo}")
        return convert_repository(data), res

    @handle_api_error("repositories.list")
    async def list(self, opts: Optional[ListOptions] = None) -> Tuple[List[Repository], Response]:
        data, res = await self.driver.do("GET", "user/repos", options=opts, paginated=True)
        return [convert_repository(item) for item in data], res

    @handle_api_error("repositories.list_hooks")
    async def list_hooks(
        self, repo: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Hook], Response]:
        split_name(repo)
        data, res = await self.driver.do(
            "GET", f"repos/{repo}/hooks", options=opts, paginated=True
        )
        return [convert_hook(item) for item in data], res

    @handle_api_error("repositories.create_hook")
    async def create_hook(self, repo: str, hook: HookInput) -> Tuple[Hook, Response]:
        split_name(repo)
        body = {
            "name": "web",
            "active": True,
            "events": list(hook.events),
            "config": {
                "url": hook.target,
                "secret": hook.secret,
                "content_type": "json",
                "insecure_ssl": "1" if hook.skip_verify else "0",
            },
        }
        data, res = await self.driver.do("POST", f"repos/{repo}/hooks", json=body)
        return convert_hook(data), res

    @handle_api_error("repositories.delete_hook")
    async def delete_hook(self, repo: str, hook_id: str) -> Response:
        split_name(repo)
        require(hook_id, "hook id")
        _, res = await self.driver.do("DELETE", f"repos/{repo}/hooks/{segment(hook_id)}")
        return res


####
##      WEBHOOKS
#####
PULL_REQUEST_ACTIONS = {
    "opened": Action.OPEN,
    "reopened": Action.REOPEN,
    "closed": Action.CLOSE,
    "synchronize": Action.SYNC,
    "edited": Action.EDIT,
    "labeled": Action.LABEL,
    "unlabeled": Action.UNLABEL,
}

ISSUE_ACTIONS = {
    "opened": Action.OPEN,
    "reopened": Action.REOPEN,
    "closed": Action.CLOSE,
    "edited": Action.EDIT,
    "labeled": Action.LABEL,
    "unlabeled": Action.UNLABEL,
    "created": Action.CREATE,
    "deleted": Action.DELETE,
}


def _hook_repo(payload: Dict[str, Any]) -> Optional[Repository]:
    data = payload.get("repository")
    return convert_repository(data) if data else None


def _push_commit(data: Dict[str, Any]) -> Commit:
    author = data.get("author") or {}
    committer = data.get("committer") or {}
    return Commit(
        sha=data["id"],
        message=data.get("message") or "",
        author=Signature(
            name=author.get("name") or "",
            email=author.get("email") or "",
            date=parse_timestamp(data.get("timestamp")),
            login=author.get("username") or "",
        ),
        committer=Signature(
            name=committer.get("name") or "",
            email=committer.get("email") or "",
            date=parse_timestamp(data.get("timestamp")),
            login=committer.get("username") or "",
        ),
        link=data.get("url") or "",
    )


def _issue(data: Dict[str, Any]) -> Issue:
    return Issue(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        link=data.get("html_url") or "",
        closed=data.get("state") == "closed",
        locked=bool(data.get("locked")),
        labels=[label["name"] for label in data.get("labels") or []],
        author=convert_user(data.get("user")),
        created=parse_timestamp(data.get("created_at")),
        updated=parse_timestamp(data.get("updated_at")),
    )


def _pull_request(data: Dict[str, Any]) -> PullRequest:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PullRequest(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        sha=head.get("sha") or "",
        ref=f"refs/pull/{data['number']}/head",
        source=head.get("ref") or "",
        target=base.get("ref") or "",
        link=data.get("html_url") or "",
        closed=data.get("state") == "closed",
        merged=bool(data.get("merged")),
        author=convert_user(data.get("user")),
        created=parse_timestamp(data.get("created_at")),
        updated=parse_timestamp(data.get("updated_at")),
    )


def decode_push(payload: Dict[str, Any]) -> PushEvent:
    return PushEvent(
        ref=payload.get("ref") or "",
        base_ref=payload.get("base_ref") or "",
        before=payload.get("before") or "",
        after=payload.get("after") or "",
        compare=payload.get("compare") or "",
        commits=[_push_commit(item) for item in payload.get("commits") or []],
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


def _decode_ref_event(payload: Dict[str, Any], action: Action) -> Event:
    name = payload.get("ref") or ""
    if payload.get("ref_type") == "tag":
        ref = Reference(name=name, path=expand_ref(name, TAG_PREFIX), sha="")
        return TagEvent(ref=ref, action=action, repo=_hook_repo(payload),
                        sender=convert_user(payload.get("sender")))
    ref = Reference(name=name, path=expand_ref(name, BRANCH_PREFIX), sha="")
    return BranchEvent(ref=ref, action=action, repo=_hook_repo(payload),
                       sender=convert_user(payload.get("sender")))


def decode_create(payload: Dict[str, Any]) -> Event:
    return _decode_ref_event(payload, Action.CREATE)


def decode_delete(payload: Dict[str, Any]) -> Event:
    return _decode_ref_event(payload, Action.DELETE)


def decode_pull_request(payload: Dict[str, Any]) -> PullRequestEvent:
    pull_request = _pull_request(payload["pull_request"])
    action = PULL_REQUEST_ACTIONS.get(payload.get("action") or "", Action.UNKNOWN)
    if action is Action.CLOSE and pull_request.merged:
        action = Action.MERGE
    return PullRequestEvent(
        action=action,
        pull_request=pull_request,
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


def decode_issue(payload: Dict[str, Any]) -> IssueEvent:
    return IssueEvent(
        action=ISSUE_ACTIONS.get(payload.get("action") or "", Action.UNKNOWN),
        issue=_issue(payload["issue"]),
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


def decode_issue_comment(payload: Dict[str, Any]) -> IssueCommentEvent:
    comment = payload["comment"]
    return IssueCommentEvent(
        action=ISSUE_ACTIONS.get(payload.get("action") or "", Action.UNKNOWN),
        issue=_issue(payload["issue"]),
        comment=Comment(
            id=comment["id"],
            body=comment.get("body") or "",
            author=convert_user(comment.get("user")),
            created=parse_timestamp(comment.get("created_at")),
            updated=parse_timestamp(comment.get("updated_at")),
        ),
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


def decode_ping(payload: Dict[str, Any]) -> PingEvent:
    return PingEvent(
        zen=payload.get("zen") or "",
        hook_id=str(payload.get("hook_id") or ""),
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


class GitHubWebhookService(WebhookService):

    def decoders(self):
        return {
            "push": decode_push,
            "create": decode_create,
            "delete": decode_delete,
            "pull_request": decode_pull_request,
            "issues": decode_issue,
            "issue_comment": decode_issue_comment,
            "ping": decode_ping,
        }


####
##      DRIVER
#####
class GitHubDriver(Driver):
    """Driver for github.com and GitHub Enterprise (``<host>/api/v3``)."""

    name = "github"
    default_base_url = "https://api.github.com"

    pagination = PaginationScheme.LINK
    page_param = "page"
    size_param = "per_page"
    rate_headers = GITHUB_RATE_HEADERS
    request_id_header = "X-GitHub-Request-Id"
    webhook_spec = WebhookSpec(
        event_header="X-GitHub-Event",
        delivery_header="X-GitHub-Delivery",
        schemes=(
            SignatureScheme("X-Hub-Signature-256", "sha256", "sha256="),
            SignatureScheme("X-Hub-Signature", "sha1", "sha1="),
        ),
    )

    git_service = GitHubGitService
    organization_service = GitHubOrganizationService
    repository_service = GitHubRepositoryService
    webhook_service = GitHubWebhookService

    def auth_headers(self):
        if not self.config.token:
            return {}
        return {"Authorization": f"Bearer {self.config.token}"}


__all__ = [
    "GitHubDriver",
    "GitHubGitService",
    "GitHubOrganizationService",
    "GitHubRepositoryService",
    "GitHubWebhookService",
]
