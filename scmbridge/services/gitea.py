"""
Gitea driver.

Page-number pagination (``page``/``limit`` with ``X-Total-Count``), no
rate-limit headers, ``X-Gitea-Signature`` signed webhooks.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..core.pagination import PaginationScheme
from ..core.webhook import SignatureScheme, WebhookSpec
from ..infrastructure.error_handler import NotSupportedError, handle_api_error
from ..models.base import parse_timestamp
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
    is_branch,
    is_tag,
    split_name,
    trim_ref,
)
from ..models.webhook import (
    Action,
    BranchEvent,
    Comment,
    Event,
    Issue,
    IssueCommentEvent,
    IssueEvent,
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
        login=data.get("login") or data.get("username") or "",
        name=data.get("full_name") or "",
        email=data.get("email") or "",
        avatar=data.get("avatar_url") or "",
    )


def convert_repository(data: Dict[str, Any]) -> Repository:
    owner = data.get("owner") or {}
    perms = data.get("permissions") or {}
    return Repository(
        id=str(data["id"]),
        namespace=owner.get("login") or owner.get("username") or "",
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
        login=account.get("login") or account.get("username") or "",
        avatar=account.get("avatar_url") or "",
    )


def convert_commit(data: Dict[str, Any]) -> Commit:
    inner = data.get("commit") or {}
    return Commit(
        sha=data.get("sha") or data.get("id") or "",
        message=inner.get("message") or "",
        author=convert_signature(inner.get("author"), data.get("author")),
        committer=convert_signature(inner.get("committer"), data.get("committer")),
        link=data.get("html_url") or "",
    )


def convert_branch(data: Dict[str, Any]) -> Reference:
    commit = data.get("commit") or {}
    return Reference(
        name=data["name"],
        path=expand_ref(data["name"], BRANCH_PREFIX),
        sha=commit.get("id") or commit.get("sha") or "",
    )


def convert_tag(data: Dict[str, Any]) -> Reference:
    commit = data.get("commit") or {}
    return Reference(
        name=data["name"],
        path=expand_ref(data["name"], TAG_PREFIX),
        sha=commit.get("sha") or data.get("id") or "",
    )


def convert_hook(data: Dict[str, Any]) -> Hook:
    config = data.get("config") or {}
    return Hook(
        id=str(data["id"]),
        name=data.get("type") or "",
        target=config.get("url") or "",
        events=list(data.get("events") or []),
        active=bool(data.get("active")),
    )


def convert_organization(data: Dict[str, Any]) -> Organization:
    return Organization(
        name=data.get("username") or data.get("name") or "",
        avatar=data.get("avatar_url") or "",
    )


####
##      SERVICES
#####
class GiteaGitService(GitService):

    commit_path = "repos/{repo}/git/commits/{sha}"

    @handle_api_error("git.find_commit")
    async def find_commit(self, repo: str, sha: str) -> Tuple[Commit, Response]:
        split_name(repo)
        require(sha, "commit sha")
        data, res = await self.driver.do("GET", self.commit_path.format(repo=repo, sha=segment(sha)))
        return convert_commit(data), res

    @handle_api_error("git.find_branch")
    async def find_branch(self, repo: str, name: str) -> Tuple[Reference, Response]:
        split_name(repo)
        require(name, "branch name")
        data, res = await self.driver.do("GET", f"repos/{repo}/branches/{segment(name, safe='/')}")
        return convert_branch(data), res

    @handle_api_error("git.find_tag")
    async def find_tag(self, repo: str, name: str) -> Tuple[Reference, Response]:
        split_name(repo)
        require(name, "tag name")
        data, res = await self.driver.do("GET", f"repos/{repo}/tags/{segment(trim_ref(name), safe='/')}")
        return convert_tag(data), res

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
        raise NotSupportedError()

    @handle_api_error("git.compare_commits")
    async def compare_commits(
        self, repo: str, base: str, head: str, opts: Optional[ListOptions] = None
    ) -> Tuple[List[Change], Response]:
        raise NotSupportedError()

    @handle_api_error("git.create_ref")
    async def create_ref(self, repo: str, ref: str, sha: str) -> Tuple[Reference, Response]:
        split_name(repo)
        require(ref, "reference")
        require(sha, "commit sha")
        path = expand_ref(ref, BRANCH_PREFIX)
        if is_branch(path):
            body = {"new_branch_name": trim_ref(path), "old_ref_name": sha}
            data, res = await self.driver.do("POST", f"repos/{repo}/branches", json=body)
            return convert_branch(data), res
        if is_tag(path):
            body = {"tag_name": trim_ref(path), "target": sha}
            data, res = await self.driver.do("POST", f"repos/{repo}/tags", json=body)
            return convert_tag(data), res
        raise NotSupportedError(f"cannot create {path}: only branches and tags")


class GiteaOrganizationService(OrganizationService):

    @handle_api_error("organizations.find")
    async def find(self, name: str) -> Tuple[Organization, Response]:
        require(name, "organization name")
        data, res = await self.driver.do("GET", f"orgs/{segment(name)}")
        return convert_organization(data), res

    @handle_api_error("organizations.list")
    async def list(self, opts: Optional[ListOptions] = None) -> Tuple[List[Organization], Response]:
        data, res = await self.driver.do("GET", "user/orgs", options=opts, paginated=True)
        return [convert_organization(item) for item in data], res


class GiteaRepositoryService(RepositoryService):

    hook_type = "gitea"

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
            "type": self.hook_type,
            "active": True,
            "events": list(hook.events),
            "config": {
                "url": hook.target,
                "secret": hook.secret,
                "content_type": "json",
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
ACTIONS = {
    "opened": Action.OPEN,
    "reopened": Action.REOPEN,
    "closed": Action.CLOSE,
    "synchronized": Action.SYNC,
    "edited": Action.EDIT,
    "label_updated": Action.LABEL,
    "label_cleared": Action.UNLABEL,
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
        locked=bool(data.get("is_locked")),
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
        before=payload.get("before") or "",
        after=payload.get("after") or "",
        compare=payload.get("compare_url") or "",
        commits=[_push_commit(item) for item in payload.get("commits") or []],
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


def _decode_ref_event(payload: Dict[str, Any], action: Action) -> Event:
    name = payload.get("ref") or ""
    sha = payload.get("sha") or ""
    if payload.get("ref_type") == "tag":
        ref = Reference(name=name, path=expand_ref(name, TAG_PREFIX), sha=sha)
        return TagEvent(ref=ref, action=action, repo=_hook_repo(payload),
                        sender=convert_user(payload.get("sender")))
    ref = Reference(name=name, path=expand_ref(name, BRANCH_PREFIX), sha=sha)
    return BranchEvent(ref=ref, action=action, repo=_hook_repo(payload),
                       sender=convert_user(payload.get("sender")))


def decode_create(payload: Dict[str, Any]) -> Event:
    return _decode_ref_event(payload, Action.CREATE)


def decode_delete(payload: Dict[str, Any]) -> Event:
    return _decode_ref_event(payload, Action.DELETE)


def decode_pull_request(payload: Dict[str, Any]) -> PullRequestEvent:
    pull_request = _pull_request(payload["pull_request"])
    action = ACTIONS.get(payload.get("action") or "", Action.UNKNOWN)
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
        action=ACTIONS.get(payload.get("action") or "", Action.UNKNOWN),
        issue=_issue(payload["issue"]),
        repo=_hook_repo(payload),
        sender=convert_user(payload.get("sender")),
    )


def decode_issue_comment(payload: Dict[str, Any]) -> IssueCommentEvent:
    comment = payload["comment"]
    return IssueCommentEvent(
        action=ACTIONS.get(payload.get("action") or "", Action.UNKNOWN),
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


class GiteaWebhookService(WebhookService):

    def decoders(self):
        return {
            "push": decode_push,
            "create": decode_create,
            "delete": decode_delete,
            "pull_request": decode_pull_request,
            "issues": decode_issue,
            "issue_comment": decode_issue_comment,
        }


####
##      DRIVER
#####
class GiteaDriver(Driver):
    """Driver for Gitea servers (API rooted at ``/api/v1``)."""

    name = "gitea"
    default_base_url = "https://gitea.com"
    api_prefix = "/api/v1"

    pagination = PaginationScheme.PAGE_NUMBER
    page_param = "page"
    size_param = "limit"
    rate_headers = None
    webhook_spec = WebhookSpec(
        event_header="X-Gitea-Event",
        delivery_header="X-Gitea-Delivery",
        schemes=(SignatureScheme("X-Gitea-Signature", "sha256"),),
    )

    git_service = GiteaGitService
    organization_service = GiteaOrganizationService
    repository_service = GiteaRepositoryService
    webhook_service = GiteaWebhookService


__all__ = [
    "GiteaDriver",
    "GiteaGitService",
    "GiteaOrganizationService",
    "GiteaRepositoryService",
    "GiteaWebhookService",
]
