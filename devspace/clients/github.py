"""Read-only GitHub REST client used by the verification sequence.

Every call is a single round-trip without retries. All ``httpx`` failures
are translated into the core's error taxonomy before leaving this module.
"""

import re
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from devspace.config import Settings
from devspace.errors import DevSpaceError, Forbidden, NotFound, RemoteError
from devspace.logging import get_logger
from devspace.schemas.github import EngineerBranch, GitHubBranch, GitHubRepository

logger = get_logger(__name__)

ENGINEER_BRANCH_PREFIX = "ai-engineer-"
_ENGINEER_BRANCH_RE = re.compile(r"^ai-engineer-([^-]+)-(.+)$")

PER_PAGE = 100


def engineer_branch_name(engineer_id: str, engineer_name: str) -> str:
    """Branch name for an engineer: ``ai-engineer-{id}-{lowercased-dashed-name}``."""
    slug = re.sub(r"\s+", "-", engineer_name.strip().lower())
    return f"{ENGINEER_BRANCH_PREFIX}{engineer_id}-{slug}"


def parse_engineer_branch(name: str) -> tuple[str, str] | None:
    """Split an engineer branch name into ``(engineer_id, engineer_name)``.

    Returns None when the name does not follow the convention.
    """
    match = _ENGINEER_BRANCH_RE.match(name)
    if not match:
        return None
    return match.group(1), match.group(2).replace("-", " ")


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _remote_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class GitHubClient:
    """Client for the GitHub REST endpoints the core needs."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubClient":
        return cls(base_url=settings.github_api_url, timeout=settings.github_timeout)

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(
        self,
        path: str,
        token: str | None,
        *,
        resource: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET ``path`` and classify the outcome.

        Args:
            path: API path relative to the base URL
            token: Access token (sent as a bearer credential)
            resource: Human-readable name used in error messages

        Raises:
            NotFound: on 404
            Forbidden: on 401/403
            RemoteError: on any other non-2xx or transport failure
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(path, headers=self._headers(token), params=params)
        except httpx.TimeoutException as e:
            logger.warning("github_request_timeout", path=path, error=str(e))
            raise RemoteError(f"GitHub request timed out while fetching {resource}") from e
        except httpx.RequestError as e:
            logger.warning("github_request_failed", path=path, error=str(e))
            raise RemoteError(f"GitHub is unreachable: {e}") from e

        if resp.is_success:
            return resp

        message = _remote_message(resp)
        if resp.status_code == httpx.codes.NOT_FOUND:
            raise NotFound(f"{resource} not found")
        if resp.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise Forbidden(f"Access denied to {resource}: {message}")
        logger.warning("github_error_response", path=path, status=resp.status_code, error=message)
        raise RemoteError(f"{resource} error: {message}", status_code=resp.status_code)

    @staticmethod
    def _parse(model: type[BaseModel], resp: httpx.Response, resource: str) -> Any:
        try:
            return model.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            raise RemoteError(f"Unexpected GitHub response for {resource}") from e

    async def _get_pages(
        self, path: str, token: str | None, *, resource: str, params: dict[str, Any] | None = None
    ) -> list[dict]:
        items: list[dict] = []
        page = 1
        while True:
            resp = await self._get(
                path,
                token,
                resource=resource,
                params={**(params or {}), "per_page": PER_PAGE, "page": page},
            )
            try:
                batch = resp.json()
            except ValueError as e:
                raise RemoteError(f"Unexpected GitHub response for {resource}") from e
            if not isinstance(batch, list):
                raise RemoteError(f"Unexpected GitHub response for {resource}")
            items.extend(batch)
            if len(batch) < PER_PAGE:
                break
            page += 1
        return items

    async def get_repository(self, owner: str, repo: str, token: str | None) -> GitHubRepository:
        """Get repository information."""
        resource = f"Repository {owner}/{repo}"
        resp = await self._get(_repo_path(owner, repo), token, resource=resource)
        repository = self._parse(GitHubRepository, resp, resource)
        logger.debug("github_repo_fetched", owner=owner, repo=repo)
        return repository

    async def get_branch(
        self, owner: str, repo: str, branch: str, token: str | None
    ) -> GitHubBranch:
        """Get a single branch. A missing branch raises NotFound."""
        resource = f"Branch {branch}"
        resp = await self._get(
            f"{_repo_path(owner, repo)}/branches/{quote(branch, safe='/')}",
            token,
            resource=resource,
        )
        return self._parse(GitHubBranch, resp, resource)

    async def list_branches(self, owner: str, repo: str, token: str | None) -> list[GitHubBranch]:
        """List every branch of the repository (all pages)."""
        resource = f"Branches of {owner}/{repo}"
        items = await self._get_pages(
            f"{_repo_path(owner, repo)}/branches", token, resource=resource
        )
        try:
            return [GitHubBranch.model_validate(item) for item in items]
        except PydanticValidationError as e:
            raise RemoteError(f"Unexpected GitHub response for {resource}") from e

    async def list_engineer_branches(
        self, owner: str, repo: str, token: str | None
    ) -> list[EngineerBranch]:
        """List branches following the engineer naming convention.

        Best effort: the count is informational, so any failure is logged
        and an empty list is returned.
        """
        try:
            branches = await self.list_branches(owner, repo, token)
        except DevSpaceError as e:
            logger.warning("github_engineer_branches_failed", owner=owner, repo=repo, error=str(e))
            return []

        result = []
        for branch in branches:
            parsed = parse_engineer_branch(branch.name)
            if parsed is None:
                continue
            engineer_id, engineer_name = parsed
            result.append(
                EngineerBranch(
                    name=branch.name,
                    sha=branch.commit.sha,
                    engineer_id=engineer_id,
                    engineer_name=engineer_name,
                )
            )
        return result

    async def list_repositories(self, token: str | None) -> list[GitHubRepository]:
        """List repositories visible to the credential, most recently updated first."""
        resource = "Repositories"
        items = await self._get_pages(
            "/user/repos", token, resource=resource, params={"sort": "updated"}
        )
        try:
            return [GitHubRepository.model_validate(item) for item in items]
        except PydanticValidationError as e:
            raise RemoteError(f"Unexpected GitHub response for {resource}") from e
