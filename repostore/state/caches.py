"""In-memory overlays for hot read paths of the repositories store."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Generic, Hashable, Iterable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class MemoryCache(Generic[K, V]):
    """Keyed overlay over persisted values.

    The lock keeps individual map operations consistent. Callers still
    assume a single writer for the store as a whole.
    """

    _entries: dict[K, V] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value

    def delete(self, key: K) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge(self, predicate: Callable[[K], bool]) -> int:
        """Drop every entry whose key matches ``predicate``."""
        with self._lock:
            stale = [key for key in self._entries if predicate(key)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class BranchProtectionCache:
    """Overlay for "is branch X of GitHub repository Y protected".

    Keys are ``(repo_id, branch_name)``. Only ``True`` is stored: absence
    means "ask storage".
    """

    def __init__(self) -> None:
        self._cache: MemoryCache[tuple[int, str], bool] = MemoryCache()

    def is_protected(self, repo_id: int, branch_name: str) -> bool:
        """Cached answer, ``False`` meaning "not known to be protected"."""
        return self._cache.get((repo_id, branch_name)) is True

    def mark_protected(self, repo_id: int, branch_name: str) -> None:
        self._cache.set((repo_id, branch_name), True)

    def replace(self, repo_id: int, branch_names: Iterable[str]) -> None:
        """Invalidate every entry of ``repo_id``, then prime ``branch_names``."""
        purged = self._cache.purge(lambda key: key[0] == repo_id)
        logger.debug(f"Purged {purged} protection entries for repository {repo_id}")
        for name in branch_names:
            self.mark_protected(repo_id, name)

    def __len__(self) -> int:
        return len(self._cache)


class TimestampCache:
    """Most-recent-wins overlay of a timestamp per local repository ID."""

    def __init__(self) -> None:
        self._cache: MemoryCache[int, datetime] = MemoryCache()

    def get(self, repo_id: int) -> datetime | None:
        return self._cache.get(repo_id)

    def set(self, repo_id: int, value: datetime) -> None:
        self._cache.set(repo_id, value)

    def discard(self, repo_id: int) -> None:
        self._cache.delete(repo_id)
