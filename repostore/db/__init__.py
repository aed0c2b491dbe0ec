"""DuckDB data layer for the repositories store."""

from .database import RepositoriesDatabase
from .queries import (
    GitHubRepositoryQueries,
    LocalRepositoryQueries,
    OwnerQueries,
    ProtectedBranchQueries,
)
from .schema import create_schema, drop_schema, get_connection

__all__ = [
    "create_schema",
    "drop_schema",
    "get_connection",
    "GitHubRepositoryQueries",
    "LocalRepositoryQueries",
    "OwnerQueries",
    "ProtectedBranchQueries",
    "RepositoriesDatabase",
]
