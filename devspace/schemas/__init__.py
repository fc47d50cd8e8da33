"""Pydantic schemas for external API responses.

Usage:
    from devspace.schemas import GitHubRepository, GitHubBranch
"""

from .github import (
    EngineerBranch,
    GitHubAccount,
    GitHubBranch,
    GitHubCommitRef,
    GitHubRepository,
)

__all__ = [
    "EngineerBranch",
    "GitHubAccount",
    "GitHubBranch",
    "GitHubCommitRef",
    "GitHubRepository",
]
