"""Repositories store: identity resolution, caches and change notification."""

from .caches import BranchProtectionCache, MemoryCache, TimestampCache
from .identity_resolver import GitHubIdentityResolver
from .notifier import ChangeNotifier
from .repositories_store import RepositoriesStore

__all__ = [
    "BranchProtectionCache",
    "ChangeNotifier",
    "GitHubIdentityResolver",
    "MemoryCache",
    "RepositoriesStore",
    "TimestampCache",
]
