"""Configuration module for repostore."""

from .loader import ConfigLoader, load_config
from .models import RepoStoreConfig, RepoStoreSettings

__all__ = [
    "ConfigLoader",
    "RepoStoreConfig",
    "RepoStoreSettings",
    "load_config",
]
