"""Configuration file loader and writer."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RepoStoreConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load and save repostore configuration."""

    CONFIG_FILENAME = "repostore.yaml"
    USER_CONFIG_DIR = Path.home() / ".repostore"

    def __init__(self, project_path: Path | None = None):
        """Initialize config loader.

        Args:
            project_path: Project directory path. If None, uses current directory.
        """
        self._project_path = project_path or Path.cwd()

    def get_config_path(self) -> Path | None:
        """Find config file (project-level first, then user-level)."""
        project_config = self._project_path / self.CONFIG_FILENAME
        if project_config.exists():
            return project_config

        user_config = self.USER_CONFIG_DIR / self.CONFIG_FILENAME
        if user_config.exists():
            return user_config

        return None

    def load(self) -> RepoStoreConfig:
        """Load configuration, returning defaults if no usable config exists."""
        config_path = self.get_config_path()
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return RepoStoreConfig()

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            config = RepoStoreConfig.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return RepoStoreConfig()

        logger.info(f"Loaded config from: {config_path}")
        return config

    def save(self, config: RepoStoreConfig, user_level: bool = False) -> Path:
        """Save configuration to the project or user config directory."""
        if user_level:
            self.USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            config_path = self.USER_CONFIG_DIR / self.CONFIG_FILENAME
        else:
            config_path = self._project_path / self.CONFIG_FILENAME

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                config.model_dump(exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

        logger.info(f"Saved config to: {config_path}")
        return config_path


def load_config(project_path: Path | str | None = None) -> RepoStoreConfig:
    """Load configuration from project or user directory."""
    path = Path(project_path) if project_path else None
    return ConfigLoader(path).load()
