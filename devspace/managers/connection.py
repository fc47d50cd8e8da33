"""Repository binding: verification state machine and verify-then-commit save.

States::

    not_configured -> checking -> connected | error
    connected | error -> checking   (verification is always re-runnable)

The binding is written to the store only after a verification of the same
owner/repo has reached ``connected``.
"""

from devspace.clients.github import GitHubClient
from devspace.contracts.dto import (
    DEFAULT_BASE_BRANCH,
    ConnectionCandidate,
    ConnectionDTO,
    ConnectionState,
    ConnectionStatus,
)
from devspace.errors import (
    Forbidden,
    NotFound,
    NotVerified,
    RemoteError,
    StorageUnavailable,
    ValidationError,
)
from devspace.logging import clear_correlation_id, get_logger, set_correlation_id
from devspace.store import CONNECTION_RECORD_ID, GITHUB_CONNECTION, LocalStore

logger = get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "Not configured"
SELECT_REPOSITORY_MESSAGE = "Select a repository to test connection"
INVALID_FORMAT_MESSAGE = "Invalid repository format"
ACCESS_DENIED_MESSAGE = "Access denied. Token may not have repository access."


class ConnectionManager:
    """Owns the single repository binding and its transient status."""

    def __init__(self, client: GitHubClient, store: LocalStore):
        self.client = client
        self.store = store
        self._status = ConnectionStatus(
            status=ConnectionState.NOT_CONFIGURED, message=NOT_CONFIGURED_MESSAGE
        )
        # (owner, repo, requested base branch) of the last successful verification
        self._verified: tuple[str, str, str] | None = None

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    def _transition(
        self, state: ConnectionState, message: str, branches: int | None = None
    ) -> ConnectionStatus:
        self._status = ConnectionStatus(status=state, message=message, branches=branches)
        if state != ConnectionState.CONNECTED:
            self._verified = None
        logger.debug("connection_status_changed", status=state.value, message=message)
        return self._status

    async def test_connection(self, candidate: ConnectionCandidate, token: str) -> ConnectionStatus:
        """Run the verification sequence for ``candidate``.

        Steps: repository lookup, base branch lookup (a missing branch is
        tolerated), engineer branch count (best effort).

        Raises:
            ValidationError: no token given; the status is left untouched.
        """
        if not token:
            raise ValidationError("GitHub token not found. Please log in again.")

        owner = candidate.github_username
        repo = candidate.github_repo_name
        if not owner or not repo:
            return self._transition(ConnectionState.ERROR, INVALID_FORMAT_MESSAGE)

        set_correlation_id()
        try:
            return await self._verify(owner, repo, candidate.base_branch, token)
        finally:
            clear_correlation_id()

    async def _verify(self, owner: str, repo: str, base_branch: str, token: str) -> ConnectionStatus:
        self._transition(ConnectionState.CHECKING, "Testing connection...")
        logger.info("connection_verification_started", owner=owner, repo=repo)

        try:
            repository = await self.client.get_repository(owner, repo, token)
        except NotFound:
            logger.info("github_repo_not_found", owner=owner, repo=repo)
            return self._transition(ConnectionState.ERROR, f"Repository not found: {owner}/{repo}")
        except Forbidden:
            logger.info("github_repo_forbidden", owner=owner, repo=repo)
            return self._transition(ConnectionState.ERROR, ACCESS_DENIED_MESSAGE)
        except RemoteError as e:
            return self._transition(ConnectionState.ERROR, e.message)

        branch = base_branch or repository.default_branch or DEFAULT_BASE_BRANCH
        try:
            await self.client.get_branch(owner, repo, branch, token)
        except NotFound:
            # Branch existence is advisory
            logger.warning("github_base_branch_missing", owner=owner, repo=repo, branch=branch)
        except (Forbidden, RemoteError) as e:
            return self._transition(ConnectionState.ERROR, f"Branch check failed: {e.message}")

        engineer_branches = await self.client.list_engineer_branches(owner, repo, token)

        status = self._transition(
            ConnectionState.CONNECTED,
            f"Connected to {owner}/{repo}",
            branches=len(engineer_branches),
        )
        self._verified = (owner, repo, base_branch or DEFAULT_BASE_BRANCH)
        logger.info(
            "connection_verified",
            owner=owner,
            repo=repo,
            branch=branch,
            engineer_branches=len(engineer_branches),
        )
        return status

    async def test_selection(
        self, full_name: str, token: str, base_branch: str = ""
    ) -> ConnectionStatus:
        """Verify an ``owner/repo`` selection from a repository picker.

        An empty selection is not an error: the status goes back to
        ``not_configured`` and nothing is fetched.
        """
        if not full_name.strip():
            return self._transition(ConnectionState.NOT_CONFIGURED, SELECT_REPOSITORY_MESSAGE)
        candidate = ConnectionCandidate.from_full_name(full_name, base_branch=base_branch)
        return await self.test_connection(candidate, token)

    def save_connection(self, candidate: ConnectionCandidate) -> ConnectionDTO:
        """Persist ``candidate`` as the binding.

        Raises:
            NotVerified: the current status is not ``connected`` for this
                owner/repo and base branch. Nothing is written.
        """
        key = (
            candidate.github_username,
            candidate.github_repo_name,
            candidate.base_branch or DEFAULT_BASE_BRANCH,
        )
        if self._status.status != ConnectionState.CONNECTED or self._verified != key:
            raise NotVerified("Please test and verify connection before saving")

        connection = ConnectionDTO(
            github_username=candidate.github_username,
            github_repo_name=candidate.github_repo_name,
            base_branch=candidate.base_branch or DEFAULT_BASE_BRANCH,
        )
        self.store.put(
            GITHUB_CONNECTION, {"id": CONNECTION_RECORD_ID, **connection.model_dump(mode="json")}
        )
        logger.info("connection_saved", repo=connection.full_name, branch=connection.base_branch)
        return connection

    def load_connection(self) -> ConnectionDTO | None:
        """The persisted binding, or None before the first save."""
        records = self.store.get(GITHUB_CONNECTION)
        record = next((r for r in records if r.get("id") == CONNECTION_RECORD_ID), None)
        if record is None:
            return None
        try:
            return ConnectionDTO.model_validate(record)
        except ValueError as e:
            raise StorageUnavailable("Stored repository connection is invalid") from e

    async def refresh(self, token: str) -> ConnectionStatus:
        """Re-verify the persisted binding."""
        connection = self.load_connection()
        if connection is None:
            return self._transition(ConnectionState.NOT_CONFIGURED, NOT_CONFIGURED_MESSAGE)
        candidate = ConnectionCandidate(
            github_username=connection.github_username,
            github_repo_name=connection.github_repo_name,
            base_branch=connection.base_branch,
        )
        return await self.test_connection(candidate, token)

    def disconnect(self) -> bool:
        """Remove the persisted binding. Returns False if there was none."""
        removed = self.store.delete(GITHUB_CONNECTION, CONNECTION_RECORD_ID)
        self._transition(ConnectionState.NOT_CONFIGURED, NOT_CONFIGURED_MESSAGE)
        if removed:
            logger.info("connection_removed")
        return removed
