"""Repository and branch descriptors as returned by the hosting-service API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class APIOwner(BaseModel):
    """Owner block of an API repository payload."""

    login: str


class APIRepository(BaseModel):
    """Remote repository descriptor.

    Unknown payload keys are ignored. ``parent`` has the same shape and is
    present only for forks.
    """

    name: str
    owner: APIOwner
    private: bool = False
    html_url: str
    default_branch: str = Field(default="main")
    clone_url: str
    parent: APIRepository | None = None


class APIBranch(BaseModel):
    """Branch descriptor. Only the name is consumed."""

    name: str
