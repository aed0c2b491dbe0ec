"""Owner model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Owner(BaseModel):
    """Account (user or organization) holding a remote repository."""

    model_config = ConfigDict(frozen=True)

    login: str = Field(..., description="Lowercased account login")
    endpoint: str = Field(..., description="API endpoint of the hosting service")
    id: int | None = Field(default=None, description="Database ID")
