"""Local repository model."""

from __future__ import annotations

from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field

from .github_repository import GitHubRepository


class LocalRepository(BaseModel):
    """A working copy on local disk, optionally linked to a GitHub repository."""

    model_config = ConfigDict(frozen=True)

    path: str
    id: int | None = Field(default=None, description="Database ID")
    github_repository: GitHubRepository | None = None
    missing: bool = Field(default=False, description="Path not found at last check")

    @property
    def name(self) -> str:
        """Directory name of the working copy."""
        return PurePath(self.path).name or self.path
