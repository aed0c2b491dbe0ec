"""Store for local repositories and their GitHub metadata."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable

from ..db import (
    GitHubRepositoryQueries,
    LocalRepositoryQueries,
    ProtectedBranchQueries,
    RepositoriesDatabase,
)
from ..errors import fatal_error
from ..models import APIBranch, APIRepository, GitHubRepository, LocalRepository
from .caches import BranchProtectionCache, TimestampCache
from .identity_resolver import GitHubIdentityResolver
from .notifier import ChangeNotifier

if TYPE_CHECKING:
    from ..config import RepoStoreSettings

logger = logging.getLogger(__name__)


class RepositoriesStore:
    """The store for local repositories.

    Every mutation fires the change notifier once it has committed. Value
    objects returned here are snapshots; re-read after a notification.
    """

    def __init__(
        self,
        database: RepositoriesDatabase,
        branch_protection_enabled: bool | Callable[[], bool] = True,
    ):
        self._db = database
        self._resolver = GitHubIdentityResolver(database)
        self._local = LocalRepositoryQueries(database.conn)
        self._github = GitHubRepositoryQueries(database.conn)
        self._protected = ProtectedBranchQueries(database.conn)
        self._notifier = ChangeNotifier()
        self._branch_protection_cache = BranchProtectionCache()
        self._last_stash_check_cache = TimestampCache()
        if callable(branch_protection_enabled):
            self._branch_protection_enabled = branch_protection_enabled
        else:
            self._branch_protection_enabled = lambda: branch_protection_enabled

    @classmethod
    def from_settings(cls, settings: RepoStoreSettings) -> RepositoriesStore:
        """Open the configured database and build a store on it."""
        database = RepositoriesDatabase.open(settings.resolved_database_path())
        return cls(database, branch_protection_enabled=settings.branch_protection_enabled)

    @property
    def database(self) -> RepositoriesDatabase:
        return self._db

    def on_did_update(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Subscribe to state changes. Returns an unsubscribe callable."""
        return self._notifier.subscribe(listener)

    def _emit_update(self) -> None:
        self._notifier.emit()

    # ========== GitHub repositories ==========

    def upsert_github_repository(
        self, endpoint: str, api_repository: APIRepository
    ) -> GitHubRepository:
        """Find the matching GitHub repository or add it if it doesn't exist."""
        return self._resolver.resolve_or_insert(endpoint, api_repository)

    def find_github_repository_by_id(self, repo_id: int) -> GitHubRepository | None:
        """Find a GitHub repository by its database ID."""
        with self._db.transaction(read_only=True):
            return self._resolver.find_by_id(repo_id)

    # ========== Local repositories ==========

    def get_all(self) -> list[LocalRepository]:
        """Get all the local repositories, in storage scan order."""
        with self._db.transaction(read_only=True):
            repositories = []
            for record in self._local.get_all():
                github_repository = None
                if record["github_repository_id"] is not None:
                    github_repository = self._resolver.find_by_id(
                        record["github_repository_id"]
                    )
                repositories.append(
                    LocalRepository(
                        path=record["path"],
                        id=record["id"],
                        github_repository=github_repository,
                        missing=record["missing"],
                    )
                )
            return repositories

    def add_repository(self, path: str) -> LocalRepository:
        """Add a new local repository.

        If a repository already exists with that path, it is returned instead.
        """
        with self._db.transaction():
            record = next((r for r in self._local.get_all() if r["path"] == path), None)
            github_repository = None
            missing = False
            if record is not None:
                repo_id = record["id"]
                missing = record["missing"]
                if record["github_repository_id"] is not None:
                    github_repository = self._resolver.find_by_id(
                        record["github_repository_id"]
                    )
            else:
                repo_id = self._local.insert(path)
                logger.info(f"Added local repository {path} ({repo_id})")

        self._emit_update()

        return LocalRepository(
            path=path, id=repo_id, github_repository=github_repository, missing=missing
        )

    def remove_repository(self, repo_id: int) -> None:
        """Remove the repository with the given ID."""
        self._local.delete(repo_id)
        self._last_stash_check_cache.discard(repo_id)
        logger.info(f"Removed local repository {repo_id}")

        self._emit_update()

    def update_repository_missing(
        self, repository: LocalRepository, missing: bool
    ) -> LocalRepository:
        """Update the repository's ``missing`` flag."""
        if repository.id is None:
            fatal_error(
                "`update_repository_missing` can only update `missing` for a "
                "repository which has been added to the database."
            )

        self._put_local_repository(repository, repository.path, missing)

        self._emit_update()

        return repository.model_copy(update={"missing": missing})

    def update_repository_path(
        self, repository: LocalRepository, path: str
    ) -> LocalRepository:
        """Update the repository's path. A moved repository is no longer missing."""
        if repository.id is None:
            fatal_error(
                "`update_repository_path` can only update the path for a "
                "repository which has been added to the database."
            )

        self._put_local_repository(repository, path, False)

        self._emit_update()

        return repository.model_copy(update={"path": path, "missing": False})

    def _put_local_repository(
        self, repository: LocalRepository, path: str, missing: bool
    ) -> None:
        github_repository_id = (
            repository.github_repository.db_id if repository.github_repository else None
        )
        with self._db.transaction():
            old_record = self._local.get(repository.id)
            last_stash_check_date = None
            if old_record is not None:
                last_stash_check_date = old_record["last_stash_check_date"]
                github_repository_id = old_record["github_repository_id"]
            self._local.put(
                {
                    "id": repository.id,
                    "path": path,
                    "github_repository_id": github_repository_id,
                    "missing": missing,
                    "last_stash_check_date": last_stash_check_date,
                }
            )

    def update_github_repository(
        self,
        repository: LocalRepository,
        endpoint: str,
        api_repository: APIRepository,
        branches: Iterable[APIBranch],
    ) -> LocalRepository:
        """Add or update the repository's GitHub repository and protected branches."""
        if repository.id is None:
            fatal_error(
                "`update_github_repository` can only update a GitHub repository for "
                "a repository which has been added to the database."
            )

        refreshed_repo_id: int | None = None
        try:
            with self._db.transaction():
                local_record = self._local.get(repository.id)
                if local_record is None:
                    fatal_error(f"Unable to find local repository with ID: {repository.id}")

                github_repository = self._resolver.put_github_repository(endpoint, api_repository)
                self._local.set_github_repository_id(local_record["id"], github_repository.db_id)

                if self._branch_protection_enabled():
                    refreshed_repo_id = github_repository.db_id
                    self._replace_protected_branches(refreshed_repo_id, branches)
        except BaseException:
            if refreshed_repo_id is not None:
                # drop entries primed for a refresh that never committed
                self._branch_protection_cache.replace(refreshed_repo_id, [])
            raise

        self._emit_update()

        return repository.model_copy(update={"github_repository": github_repository})

    def _replace_protected_branches(
        self, repo_id: int, branches: Iterable[APIBranch]
    ) -> None:
        names = list(dict.fromkeys(branch.name for branch in branches))

        # Cache first, so readers never see a stale "protected" while the
        # table is being replaced.
        self._branch_protection_cache.replace(repo_id, names)

        self._protected.replace_for_repository(repo_id, names)
        logger.debug(f"Stored {len(names)} protected branches for repository {repo_id}")

    def is_branch_protected(
        self, github_repository: GitHubRepository, branch_name: str
    ) -> bool:
        """Whether ``branch_name`` is protected on the remote."""
        if github_repository.db_id is None:
            fatal_error("Unable to get protected branches, GitHub repository has no db_id")

        repo_id = github_repository.db_id
        if self._branch_protection_cache.is_protected(repo_id, branch_name):
            return True

        protected = self._protected.get(repo_id, branch_name) is not None
        if protected:
            self._branch_protection_cache.mark_protected(repo_id, branch_name)
        return protected

    # ========== Local-only dates ==========

    def update_last_stash_check_date(
        self, repository: LocalRepository, date: datetime | None = None
    ) -> None:
        """Set the last time the repository was checked for stash entries.

        Args:
            repository: Repository to update.
            date: When the check took place. Defaults to now.
        """
        if repository.id is None:
            fatal_error(
                "`update_last_stash_check_date` can only update the last stash check "
                "date for a repository which has been added to the database."
            )

        if date is None:
            date = datetime.now(timezone.utc)
        self._local.set_last_stash_check_date(repository.id, date)
        self._last_stash_check_cache.set(repository.id, date)

        self._emit_update()

    def get_last_stash_check_date(self, repository: LocalRepository) -> datetime | None:
        """Get the last time the repository was checked for stash entries."""
        if repository.id is None:
            fatal_error(
                "`get_last_stash_check_date` can only retrieve the last stash check "
                "date for a repository stored in the database."
            )

        cached = self._last_stash_check_cache.get(repository.id)
        if cached is not None:
            return cached

        record = self._local.get(repository.id)
        if record is None:
            fatal_error(
                f"`get_last_stash_check_date` unable to find repository with ID: {repository.id}"
            )

        last_check_date = record["last_stash_check_date"]
        if last_check_date is not None:
            self._last_stash_check_cache.set(repository.id, last_check_date)
        return last_check_date

    def _github_repository_id(self, repository: LocalRepository, operation: str) -> int:
        if repository.id is None:
            fatal_error(
                f"`{operation}` requires a repository which has been added to the database."
            )
        if repository.github_repository is None:
            fatal_error(f"`{operation}` can only be used with GitHub repositories.")
        if repository.github_repository.db_id is None:
            fatal_error(
                f"`{operation}` requires a GitHub repository stored in the database."
            )
        return repository.github_repository.db_id

    def update_last_prune_date(self, repository: LocalRepository, date: datetime) -> None:
        """Set the last time the repository's remote branches were pruned."""
        repo_id = self._github_repository_id(repository, "update_last_prune_date")

        self._github.set_last_prune_date(repo_id, date)

        self._emit_update()

    def get_last_prune_date(self, repository: LocalRepository) -> datetime | None:
        """Get the last time the repository's remote branches were pruned."""
        repo_id = self._github_repository_id(repository, "get_last_prune_date")

        record = self._github.get(repo_id)
        if record is None:
            fatal_error(
                f"`get_last_prune_date` unable to find GitHub repository with ID: {repo_id}"
            )
        return record["last_prune_date"]
