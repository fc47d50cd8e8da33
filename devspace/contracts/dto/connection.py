from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_BRANCH = "main"


class ConnectionState(str, Enum):
    NOT_CONFIGURED = "not_configured"
    CHECKING = "checking"
    CONNECTED = "connected"
    ERROR = "error"


class ConnectionCandidate(BaseModel):
    """A binding that has not been verified yet.

    Any field may be empty; verification rejects incomplete candidates.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    github_username: str = ""
    github_repo_name: str = ""
    base_branch: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.github_username}/{self.github_repo_name}"

    @classmethod
    def from_full_name(cls, full_name: str, base_branch: str = "") -> "ConnectionCandidate":
        """Build a candidate from an ``owner/repo`` selection."""
        owner, _, repo = full_name.strip().partition("/")
        return cls(github_username=owner, github_repo_name=repo, base_branch=base_branch)


class ConnectionDTO(BaseModel):
    """The verified binding stored in the ``github_connection`` collection."""

    model_config = ConfigDict(from_attributes=True)

    github_username: str = Field(..., min_length=1)
    github_repo_name: str = Field(..., min_length=1)
    base_branch: str = DEFAULT_BASE_BRANCH

    @property
    def full_name(self) -> str:
        return f"{self.github_username}/{self.github_repo_name}"


class ConnectionStatus(BaseModel):
    """Session-local verification state. Never persisted."""

    model_config = ConfigDict(frozen=True)

    status: ConnectionState
    message: str
    branches: int | None = None
