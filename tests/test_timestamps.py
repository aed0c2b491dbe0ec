"""Tests for the stash-check and prune dates."""

from datetime import datetime, timedelta, timezone

import pytest

from factories import ENDPOINT, make_api_repository
from repostore.db import LocalRepositoryQueries
from repostore.errors import FatalError
from repostore.models import LocalRepository
from repostore.state import RepositoriesStore


class TestLastStashCheckDate:
    def test_set_then_get_returns_value(self, store, updates):
        repo = store.add_repository("/a")
        checked = datetime(2024, 3, 4, 5, 6, 7, 891011, tzinfo=timezone.utc)

        store.update_last_stash_check_date(repo, checked)

        assert store.get_last_stash_check_date(repo) == checked
        assert len(updates) == 2

    def test_never_checked_returns_none(self, store):
        repo = store.add_repository("/a")

        assert store.get_last_stash_check_date(repo) is None

    def test_defaults_to_now(self, store):
        repo = store.add_repository("/a")
        before = datetime.now(timezone.utc)

        store.update_last_stash_check_date(repo)

        checked = store.get_last_stash_check_date(repo)
        assert before - timedelta(seconds=1) <= checked <= datetime.now(timezone.utc)

    def test_naive_datetime_returned_unchanged(self, store):
        repo = store.add_repository("/a")
        checked = datetime(2024, 1, 1, 8, 0)

        store.update_last_stash_check_date(repo, checked)

        assert store.get_last_stash_check_date(repo) == checked

    def test_naive_datetime_stored_as_utc(self, store, database):
        repo = store.add_repository("/a")
        store.update_last_stash_check_date(repo, datetime(2024, 1, 1, 8, 0))

        cold = RepositoriesStore(database)

        assert cold.get_last_stash_check_date(repo) == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    def test_value_persisted_for_fresh_store(self, store, database):
        repo = store.add_repository("/a")
        checked = datetime(2024, 3, 4, tzinfo=timezone(timedelta(hours=9)))
        store.update_last_stash_check_date(repo, checked)

        cold = RepositoriesStore(database)

        assert cold.get_last_stash_check_date(repo) == checked

    def test_most_recent_wins(self, store):
        repo = store.add_repository("/a")
        store.update_last_stash_check_date(repo, datetime(2024, 1, 1, tzinfo=timezone.utc))
        store.update_last_stash_check_date(repo, datetime(2024, 2, 1, tzinfo=timezone.utc))

        assert store.get_last_stash_check_date(repo) == datetime(2024, 2, 1, tzinfo=timezone.utc)

    def test_removed_repository_is_fatal_on_read(self, store):
        repo = store.add_repository("/a")
        store.remove_repository(repo.id)

        with pytest.raises(FatalError):
            store.get_last_stash_check_date(repo)

    def test_unpersisted_repository_is_fatal(self, store, database, updates):
        unsaved = LocalRepository(path="/a")

        with pytest.raises(FatalError):
            store.update_last_stash_check_date(unsaved, datetime.now(timezone.utc))
        with pytest.raises(FatalError):
            store.get_last_stash_check_date(unsaved)

        assert LocalRepositoryQueries(database.conn).count() == 0
        assert updates == []


class TestLastPruneDate:
    @pytest.fixture
    def linked(self, store):
        repo = store.add_repository("/work/desktop")
        return store.update_github_repository(repo, ENDPOINT, make_api_repository(), [])

    def test_set_then_get(self, store, linked, updates):
        pruned = datetime(2024, 6, 7, 8, 9, tzinfo=timezone.utc)
        before = len(updates)

        store.update_last_prune_date(linked, pruned)

        assert store.get_last_prune_date(linked) == pruned
        assert len(updates) == before + 1

    def test_never_pruned_returns_none(self, store, linked):
        assert store.get_last_prune_date(linked) is None

    def test_survives_remote_refresh(self, store, linked):
        pruned = datetime(2024, 6, 7, tzinfo=timezone.utc)
        store.update_last_prune_date(linked, pruned)

        store.update_github_repository(linked, ENDPOINT, make_api_repository(private=True), [])

        assert store.get_last_prune_date(linked) == pruned

    def test_requires_github_repository(self, store):
        repo = store.add_repository("/a")

        with pytest.raises(FatalError, match="GitHub"):
            store.update_last_prune_date(repo, datetime.now(timezone.utc))
        with pytest.raises(FatalError, match="GitHub"):
            store.get_last_prune_date(repo)

    def test_unpersisted_repository_is_fatal(self, store):
        with pytest.raises(FatalError):
            store.get_last_prune_date(LocalRepository(path="/a"))
