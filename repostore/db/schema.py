"""DuckDB schema definitions."""

import logging

import duckdb

logger = logging.getLogger(__name__)


def get_connection(path: str = ":memory:") -> duckdb.DuckDBPyConnection:
    """Get a DuckDB connection."""
    return duckdb.connect(path)


def create_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Create DuckDB tables for the repositories store."""

    # Sequences for store-assigned identifiers
    conn.execute("CREATE SEQUENCE IF NOT EXISTS owners_id_seq START 1")
    conn.execute("CREATE SEQUENCE IF NOT EXISTS github_repositories_id_seq START 1")
    conn.execute("CREATE SEQUENCE IF NOT EXISTS local_repositories_id_seq START 1")

    # Accounts holding remote repositories, unique per (endpoint, login)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS owners (
            id INTEGER PRIMARY KEY,
            login VARCHAR NOT NULL,
            endpoint VARCHAR NOT NULL
        )
    """)

    # Remote repositories (parent_id points at the fork source)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS github_repositories (
            id INTEGER PRIMARY KEY,
            owner_id INTEGER NOT NULL,
            name VARCHAR NOT NULL,
            private BOOLEAN,
            html_url VARCHAR,
            default_branch VARCHAR,
            clone_url VARCHAR,
            parent_id INTEGER,
            last_prune_date TIMESTAMP
        )
    """)

    # A row means the branch is protected
    conn.execute("""
        CREATE TABLE IF NOT EXISTS protected_branches (
            repo_id INTEGER NOT NULL,
            name VARCHAR NOT NULL
        )
    """)

    # Working copies on disk
    conn.execute("""
        CREATE TABLE IF NOT EXISTS local_repositories (
            id INTEGER PRIMARY KEY,
            path VARCHAR NOT NULL,
            github_repository_id INTEGER,
            missing BOOLEAN NOT NULL DEFAULT false,
            last_stash_check_date TIMESTAMP
        )
    """)

    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_owners_endpoint_login ON owners(endpoint, login)"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_github_repositories_clone_url ON github_repositories(clone_url)"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_github_repositories_owner_name ON github_repositories(owner_id, name)"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_protected_branches_key ON protected_branches(repo_id, name)"
    )

    logger.info("Repositories schema ready")


def drop_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Drop all tables."""
    conn.execute("DROP TABLE IF EXISTS protected_branches")
    conn.execute("DROP TABLE IF EXISTS local_repositories")
    conn.execute("DROP TABLE IF EXISTS github_repositories")
    conn.execute("DROP TABLE IF EXISTS owners")
    conn.execute("DROP SEQUENCE IF EXISTS local_repositories_id_seq")
    conn.execute("DROP SEQUENCE IF EXISTS github_repositories_id_seq")
    conn.execute("DROP SEQUENCE IF EXISTS owners_id_seq")
