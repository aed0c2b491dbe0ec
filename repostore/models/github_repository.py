"""GitHub repository model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .owner import Owner


class GitHubRepository(BaseModel):
    """Canonical identity of a remote repository.

    ``parent`` holds the fork source as a nested value, reconstructed by ID
    lookup on every read. It is never a live reference into the store.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    owner: Owner
    db_id: int | None = Field(default=None, description="Database ID")
    private: bool | None = None
    html_url: str | None = None
    default_branch: str | None = None
    clone_url: str | None = None
    parent: GitHubRepository | None = None

    @property
    def full_name(self) -> str:
        """``owner/name``."""
        return f"{self.owner.login}/{self.name}"

    @property
    def endpoint(self) -> str:
        return self.owner.endpoint

    @property
    def is_fork(self) -> bool:
        return self.parent is not None

    def fork_depth(self) -> int:
        """Number of ancestors in the parent chain."""
        depth = 0
        parent = self.parent
        while parent is not None:
            depth += 1
            parent = parent.parent
        return depth
