"""Tests for the command line entry point."""

import sys

import yaml

from repostore import main as main_module
from repostore.config import ConfigLoader
from repostore.db import RepositoriesDatabase
from repostore.state import RepositoriesStore

from factories import ENDPOINT, make_api_repository


def test_main_lists_repositories(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(ConfigLoader, "USER_CONFIG_DIR", tmp_path / "user")
    db_path = tmp_path / "repos.duckdb"
    (tmp_path / "repostore.yaml").write_text(
        yaml.safe_dump({"settings": {"database_path": str(db_path)}})
    )

    database = RepositoriesDatabase.open(str(db_path))
    store = RepositoriesStore(database)
    linked = store.add_repository("/work/desktop")
    store.update_github_repository(linked, ENDPOINT, make_api_repository(), [])
    store.update_repository_missing(store.add_repository("/work/gone"), True)
    database.close()

    monkeypatch.setattr(sys, "argv", ["repostore", str(tmp_path)])
    main_module.main()

    out = capsys.readouterr().out
    assert "/work/desktop\tocto/desktop" in out
    assert "/work/gone\t- (missing)" in out
