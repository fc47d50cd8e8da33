"""Clients for external services."""

from .github import GitHubClient, engineer_branch_name, parse_engineer_branch

__all__ = [
    "GitHubClient",
    "engineer_branch_name",
    "parse_engineer_branch",
]
