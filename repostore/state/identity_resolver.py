"""Dedup and upsert of remote repository identities."""

from __future__ import annotations

import logging
from typing import Any

from ..db import GitHubRepositoryQueries, OwnerQueries, RepositoriesDatabase
from ..errors import fatal_error
from ..models import APIRepository, GitHubRepository, Owner

logger = logging.getLogger(__name__)


class GitHubIdentityResolver:
    """Maps API repository descriptors onto canonical owner and repository rows.

    A repository is the same repository when it has the same clone URL, or
    failing that the same ``(owner, name)``. Owners are the same owner when
    they share ``(endpoint, lowercased login)``.
    """

    def __init__(self, database: RepositoriesDatabase):
        self._db = database
        self._owners = OwnerQueries(database.conn)
        self._repositories = GitHubRepositoryQueries(database.conn)

    def resolve_or_insert(
        self, endpoint: str, api_repository: APIRepository
    ) -> GitHubRepository:
        """Find the matching GitHub repository or add it if it doesn't exist."""
        with self._db.transaction():
            existing = self._repositories.find_by_clone_url(api_repository.clone_url)
            if existing is None:
                return self.put_github_repository(endpoint, api_repository)
            logger.debug(f"Clone URL hit for {api_repository.clone_url}")
            return self._build(existing)

    def put_github_repository(
        self, endpoint: str, api_repository: APIRepository
    ) -> GitHubRepository:
        """Upsert ``api_repository`` and its parent chain.

        Must run inside a transaction. Remote-sourced fields are overwritten;
        ``last_prune_date`` is kept.
        """
        parent: GitHubRepository | None = None
        if api_repository.parent is not None:
            parent = self.put_github_repository(endpoint, api_repository.parent)

        owner = self.put_owner(endpoint, api_repository.owner.login)

        record: dict[str, Any] = {
            "owner_id": owner.id,
            "name": api_repository.name,
            "private": api_repository.private,
            "html_url": api_repository.html_url,
            "default_branch": api_repository.default_branch,
            "clone_url": api_repository.clone_url,
            "parent_id": parent.db_id if parent else None,
            "last_prune_date": None,
        }

        existing = self._repositories.find_by_owner_and_name(owner.id, api_repository.name)
        if existing is not None:
            record["last_prune_date"] = existing["last_prune_date"]
            self._repositories.update(existing, record)
            repo_id = existing["id"]
        else:
            repo_id = self._repositories.insert(record)
            logger.debug(f"Inserted GitHub repository {owner.login}/{api_repository.name} ({repo_id})")

        return GitHubRepository(
            name=record["name"],
            owner=owner,
            db_id=repo_id,
            private=record["private"],
            html_url=record["html_url"],
            default_branch=record["default_branch"],
            clone_url=record["clone_url"],
            parent=parent,
        )

    def put_owner(self, endpoint: str, login: str) -> Owner:
        """Return the owner for ``(endpoint, login)``, inserting it if needed."""
        login = login.lower()

        existing = self._owners.find(endpoint, login)
        if existing is not None:
            return Owner(login=login, endpoint=endpoint, id=existing["id"])

        owner_id = self._owners.insert(endpoint, login)
        logger.debug(f"Inserted owner {login}@{endpoint} ({owner_id})")
        return Owner(login=login, endpoint=endpoint, id=owner_id)

    def find_by_id(self, repo_id: int) -> GitHubRepository | None:
        """Reconstruct a GitHub repository, including its parent chain."""
        record = self._repositories.get(repo_id)
        if record is None:
            return None
        return self._build(record)

    def _build(self, record: dict[str, Any]) -> GitHubRepository:
        owner = self._owners.get(record["owner_id"])
        if owner is None:
            fatal_error(f"Couldn't find the owner for {record['name']}")

        parent: GitHubRepository | None = None
        if record["parent_id"]:
            parent = self.find_by_id(record["parent_id"])

        return GitHubRepository(
            name=record["name"],
            owner=Owner(login=owner["login"], endpoint=owner["endpoint"], id=owner["id"]),
            db_id=record["id"],
            private=record["private"],
            html_url=record["html_url"],
            default_branch=record["default_branch"],
            clone_url=record["clone_url"],
            parent=parent,
        )
