"""Value models for the repositories store."""

from .api import APIBranch, APIOwner, APIRepository
from .github_repository import GitHubRepository
from .owner import Owner
from .repository import LocalRepository

__all__ = [
    "APIBranch",
    "APIOwner",
    "APIRepository",
    "GitHubRepository",
    "LocalRepository",
    "Owner",
]
