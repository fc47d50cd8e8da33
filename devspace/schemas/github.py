"""Pydantic schemas for GitHub API responses.

Only the fields the core reads are declared; everything else GitHub sends
is kept through ``extra="allow"``.

GitHub API Documentation: https://docs.github.com/en/rest
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GitHubAccount(BaseModel):
    """GitHub account (user or organization)."""

    model_config = ConfigDict(extra="allow")

    login: str = Field(..., description="Account username/org name")
    id: int | None = Field(None, description="Numeric account ID")
    type: str | None = Field(None, description="Account type: 'User' or 'Organization'")


class GitHubRepository(BaseModel):
    """GitHub repository info.

    Returned from GET /repos/{owner}/{repo} and GET /user/repos.
    """

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Repository ID")
    name: str = Field(..., description="Repository name")
    full_name: str = Field(..., description="Full name: owner/repo")
    private: bool = Field(True, description="Whether repo is private")
    description: str | None = Field(None, description="Repository description")
    html_url: str | None = Field(None, description="Web URL for the repository")
    owner: GitHubAccount | None = Field(None, description="Repository owner")

    # Missing on empty repositories
    default_branch: str | None = Field(None, description="Default branch name")
    updated_at: datetime | None = Field(None, description="Last update timestamp")


class GitHubCommitRef(BaseModel):
    """Commit pointer embedded in branch responses."""

    model_config = ConfigDict(extra="allow")

    sha: str = Field(..., description="Commit SHA")
    url: str | None = Field(None, description="API URL for the commit")


class GitHubBranch(BaseModel):
    """Branch info.

    Returned from GET /repos/{owner}/{repo}/branches/{branch} and as list
    items from GET /repos/{owner}/{repo}/branches.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Branch name")
    commit: GitHubCommitRef = Field(..., description="Head commit of the branch")
    protected: bool = Field(False, description="Whether branch protection is enabled")


class EngineerBranch(BaseModel):
    """A branch that follows the ``ai-engineer-{id}-{name}`` convention."""

    name: str
    sha: str
    engineer_id: str
    engineer_name: str
