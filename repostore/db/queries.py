"""Predefined SQL queries for the repositories tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

import duckdb


def to_db_timestamp(value: datetime | None) -> datetime | None:
    """Convert a datetime to naive UTC for a TIMESTAMP column.

    Naive values are taken to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def from_db_timestamp(value: datetime | None) -> datetime | None:
    """Convert a TIMESTAMP column value back to an aware UTC datetime."""
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


class _TableQueries:
    """Shared row conversion for a single table."""

    COLUMNS: tuple[str, ...] = ()

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self.conn = conn

    def _to_dict(self, row: tuple) -> dict[str, Any]:
        """Convert a row to a dictionary."""
        return dict(zip(self.COLUMNS, row))

    def _to_dicts(self, rows: list[tuple]) -> list[dict[str, Any]]:
        """Convert rows to dictionaries."""
        return [self._to_dict(row) for row in rows]

    def _one(self, sql: str, params: list[Any]) -> dict[str, Any] | None:
        """Fetch a single row as a dictionary, or None."""
        result = self.conn.execute(sql, params).fetchone()
        if result:
            return self._to_dict(result)
        return None


class OwnerQueries(_TableQueries):
    """Queries against the owners table."""

    COLUMNS = ("id", "login", "endpoint")

    def get(self, owner_id: int) -> dict[str, Any] | None:
        """Get owner by ID."""
        return self._one("SELECT id, login, endpoint FROM owners WHERE id = ?", [owner_id])

    def find(self, endpoint: str, login: str) -> dict[str, Any] | None:
        """Exact lookup by the (endpoint, login) pair."""
        return self._one(
            "SELECT id, login, endpoint FROM owners WHERE endpoint = ? AND login = ? LIMIT 1",
            [endpoint, login],
        )

    def insert(self, endpoint: str, login: str) -> int:
        """Insert an owner and return its new ID."""
        result = self.conn.execute(
            """
            INSERT INTO owners (id, login, endpoint)
            VALUES (nextval('owners_id_seq'), ?, ?)
            RETURNING id
            """,
            [login, endpoint],
        ).fetchone()
        return result[0]

    def count(self) -> int:
        """Count rows in the table."""
        return self.conn.execute("SELECT COUNT(*) FROM owners").fetchone()[0]


class GitHubRepositoryQueries(_TableQueries):
    """Queries against the github_repositories table."""

    COLUMNS = (
        "id",
        "owner_id",
        "name",
        "private",
        "html_url",
        "default_branch",
        "clone_url",
        "parent_id",
        "last_prune_date",
    )
    _SELECT = (
        "SELECT id, owner_id, name, private, html_url, default_branch, "
        "clone_url, parent_id, last_prune_date FROM github_repositories"
    )

    def _to_dict(self, row: tuple) -> dict[str, Any]:
        """Convert a row to a dictionary with an aware prune date."""
        record = super()._to_dict(row)
        record["last_prune_date"] = from_db_timestamp(record["last_prune_date"])
        return record

    def get(self, repo_id: int) -> dict[str, Any] | None:
        """Get GitHub repository by ID."""
        return self._one(f"{self._SELECT} WHERE id = ?", [repo_id])

    def find_by_clone_url(self, clone_url: str) -> dict[str, Any] | None:
        """Get the GitHub repository with this clone URL."""
        return self._one(f"{self._SELECT} WHERE clone_url = ? LIMIT 1", [clone_url])

    def find_by_owner_and_name(self, owner_id: int, name: str) -> dict[str, Any] | None:
        """Get the GitHub repository named name under owner_id."""
        return self._one(
            f"{self._SELECT} WHERE owner_id = ? AND name = ? LIMIT 1", [owner_id, name]
        )

    def insert(self, record: dict[str, Any]) -> int:
        """Insert a GitHub repository and return its new ID."""
        result = self.conn.execute(
            """
            INSERT INTO github_repositories (
                id, owner_id, name, private, html_url, default_branch,
                clone_url, parent_id, last_prune_date
            ) VALUES (nextval('github_repositories_id_seq'), ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [
                record["owner_id"],
                record["name"],
                record["private"],
                record["html_url"],
                record["default_branch"],
                record["clone_url"],
                record["parent_id"],
                to_db_timestamp(record["last_prune_date"]),
            ],
        ).fetchone()
        return result[0]

    def update(self, existing: dict[str, Any], record: dict[str, Any]) -> None:
        """Overwrite the remote-sourced fields of an existing row.

        ``owner_id`` and ``name`` identify the row and never change here.
        ``clone_url`` is indexed, so it is only written when it differs.
        """
        self.conn.execute(
            """
            UPDATE github_repositories
            SET private = ?, html_url = ?, default_branch = ?, parent_id = ?,
                last_prune_date = ?
            WHERE id = ?
            """,
            [
                record["private"],
                record["html_url"],
                record["default_branch"],
                record["parent_id"],
                to_db_timestamp(record["last_prune_date"]),
                existing["id"],
            ],
        )
        if existing["clone_url"] != record["clone_url"]:
            self.conn.execute(
                "UPDATE github_repositories SET clone_url = ? WHERE id = ?",
                [record["clone_url"], existing["id"]],
            )

    def set_last_prune_date(self, repo_id: int, date: datetime | None) -> None:
        """Set the local-only prune date."""
        self.conn.execute(
            "UPDATE github_repositories SET last_prune_date = ? WHERE id = ?",
            [to_db_timestamp(date), repo_id],
        )

    def count(self) -> int:
        """Count rows in the table."""
        return self.conn.execute("SELECT COUNT(*) FROM github_repositories").fetchone()[0]


class ProtectedBranchQueries(_TableQueries):
    """Queries against the protected_branches table."""

    COLUMNS = ("repo_id", "name")

    def get(self, repo_id: int, name: str) -> dict[str, Any] | None:
        """Get the protected branch row for (repo_id, name)."""
        return self._one(
            "SELECT repo_id, name FROM protected_branches WHERE repo_id = ? AND name = ? LIMIT 1",
            [repo_id, name],
        )

    def get_for_repository(self, repo_id: int) -> list[dict[str, Any]]:
        """Get all protected branches of a repository."""
        result = self.conn.execute(
            "SELECT repo_id, name FROM protected_branches WHERE repo_id = ? ORDER BY name",
            [repo_id],
        ).fetchall()
        return self._to_dicts(result)

    def replace_for_repository(self, repo_id: int, names: Iterable[str]) -> None:
        """Delete every row for ``repo_id`` and bulk insert ``names``."""
        self.conn.execute("DELETE FROM protected_branches WHERE repo_id = ?", [repo_id])
        rows = [[repo_id, name] for name in names]
        if rows:
            self.conn.executemany(
                "INSERT INTO protected_branches (repo_id, name) VALUES (?, ?)", rows
            )


class LocalRepositoryQueries(_TableQueries):
    """Queries against the local_repositories table."""

    COLUMNS = ("id", "path", "github_repository_id", "missing", "last_stash_check_date")
    _SELECT = (
        "SELECT id, path, github_repository_id, missing, last_stash_check_date "
        "FROM local_repositories"
    )

    def _to_dict(self, row: tuple) -> dict[str, Any]:
        """Convert a row to a dictionary with an aware stash check date."""
        record = super()._to_dict(row)
        record["last_stash_check_date"] = from_db_timestamp(record["last_stash_check_date"])
        return record

    def get(self, repo_id: int) -> dict[str, Any] | None:
        """Get local repository by ID."""
        return self._one(f"{self._SELECT} WHERE id = ?", [repo_id])

    def get_all(self) -> list[dict[str, Any]]:
        """Full scan in storage order."""
        return self._to_dicts(self.conn.execute(self._SELECT).fetchall())

    def insert(self, path: str) -> int:
        """Insert a local repository and return its new ID."""
        result = self.conn.execute(
            """
            INSERT INTO local_repositories (id, path, github_repository_id, missing, last_stash_check_date)
            VALUES (nextval('local_repositories_id_seq'), ?, NULL, false, NULL)
            RETURNING id
            """,
            [path],
        ).fetchone()
        return result[0]

    def put(self, record: dict[str, Any]) -> None:
        """Write a full row under its existing id, inserting it if absent."""
        params = [
            record["path"],
            record["github_repository_id"],
            record["missing"],
            to_db_timestamp(record["last_stash_check_date"]),
            record["id"],
        ]
        if self.get(record["id"]) is None:
            self.conn.execute(
                """
                INSERT INTO local_repositories (path, github_repository_id, missing, last_stash_check_date, id)
                VALUES (?, ?, ?, ?, ?)
                """,
                params,
            )
            return
        self.conn.execute(
            """
            UPDATE local_repositories
            SET path = ?, github_repository_id = ?, missing = ?, last_stash_check_date = ?
            WHERE id = ?
            """,
            params,
        )

    def set_github_repository_id(self, repo_id: int, github_repository_id: int | None) -> None:
        """Link a local repository to a GitHub repository."""
        self.conn.execute(
            "UPDATE local_repositories SET github_repository_id = ? WHERE id = ?",
            [github_repository_id, repo_id],
        )

    def set_last_stash_check_date(self, repo_id: int, date: datetime | None) -> None:
        """Set the last stash check date."""
        self.conn.execute(
            "UPDATE local_repositories SET last_stash_check_date = ? WHERE id = ?",
            [to_db_timestamp(date), repo_id],
        )

    def delete(self, repo_id: int) -> None:
        """Delete local repository by ID. Unknown IDs are ignored."""
        self.conn.execute("DELETE FROM local_repositories WHERE id = ?", [repo_id])

    def count(self) -> int:
        """Count rows in the table."""
        return self.conn.execute("SELECT COUNT(*) FROM local_repositories").fetchone()[0]
