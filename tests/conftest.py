"""Shared pytest fixtures for repostore tests."""

from collections.abc import Generator

import pytest

from repostore.db import RepositoriesDatabase
from repostore.state import RepositoriesStore


@pytest.fixture
def database() -> Generator[RepositoriesDatabase, None, None]:
    """Fresh in-memory database with the schema created."""
    db = RepositoriesDatabase.open(":memory:")
    yield db
    db.close()


@pytest.fixture
def store(database) -> RepositoriesStore:
    return RepositoriesStore(database)


@pytest.fixture
def updates(store) -> list[int]:
    """Records one entry per change notification."""
    events: list[int] = []
    store.on_did_update(lambda: events.append(len(events)))
    return events
