"""Builders for API descriptors used across tests."""

from repostore.models import APIOwner, APIRepository

ENDPOINT = "https://api.github.com"


def make_api_repository(
    name: str = "desktop",
    login: str = "Octo",
    parent: APIRepository | None = None,
    **overrides,
) -> APIRepository:
    """Build an API repository descriptor with plausible URLs."""
    fields = {
        "name": name,
        "owner": APIOwner(login=login),
        "private": False,
        "html_url": f"https://github.com/{login}/{name}",
        "default_branch": "main",
        "clone_url": f"https://github.com/{login}/{name}.git",
        "parent": parent,
    }
    fields.update(overrides)
    return APIRepository(**fields)


def make_fork_chain(depth: int) -> APIRepository:
    """Descriptor whose parent chain is ``depth`` levels deep."""
    descriptor = make_api_repository(name="repo", login="origin")
    for level in range(1, depth + 1):
        descriptor = make_api_repository(name="repo", login=f"fork{level}", parent=descriptor)
    return descriptor
