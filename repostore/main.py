"""Entry point for repostore."""

import logging
import sys
from pathlib import Path

from .config import load_config
from .state import RepositoriesStore


def main():
    """List the local repositories known to the configured store."""
    project_path = Path(sys.argv[1]).resolve() if len(sys.argv) > 1 else Path.cwd()

    config = load_config(project_path)
    logging.basicConfig(
        level=config.settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = RepositoriesStore.from_settings(config.settings)
    try:
        for repository in store.get_all():
            remote = (
                repository.github_repository.full_name
                if repository.github_repository
                else "-"
            )
            flag = " (missing)" if repository.missing else ""
            print(f"{repository.id}\t{repository.path}\t{remote}{flag}")
    finally:
        store.database.close()


if __name__ == "__main__":
    main()
