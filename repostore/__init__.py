"""Local metadata store for GitHub repositories and their working copies."""

from .errors import FatalError
from .models import (
    APIBranch,
    APIOwner,
    APIRepository,
    GitHubRepository,
    LocalRepository,
    Owner,
)
from .state import RepositoriesStore

__version__ = "0.1.0"

__all__ = [
    "APIBranch",
    "APIOwner",
    "APIRepository",
    "FatalError",
    "GitHubRepository",
    "LocalRepository",
    "Owner",
    "RepositoriesStore",
]
