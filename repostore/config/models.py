"""Configuration models for repostore."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RepoStoreSettings(BaseModel):
    """Store settings."""

    database_path: str = Field(
        default="~/.repostore/repositories.duckdb",
        description="DuckDB file path, or :memory:",
    )
    branch_protection_enabled: bool = Field(
        default=True, description="Persist and refresh protected branches"
    )
    log_level: str = Field(default="INFO", description="Root logger level")

    def resolved_database_path(self) -> str:
        """Expand ``~`` and create the parent directory for file databases."""
        if self.database_path == ":memory:":
            return self.database_path
        path = Path(self.database_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


class RepoStoreConfig(BaseModel):
    """Root configuration model."""

    version: int = Field(default=1)
    settings: RepoStoreSettings = Field(default_factory=RepoStoreSettings)
