"""Application configuration management."""

import os
from functools import lru_cache
from pathlib import Path

from .schemas import AppConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """
    Load application configuration.

    Reads the file named by the COLEGAS_CONFIG environment variable, or
    data/league_config.json. A missing file yields the schema defaults.
    Configuration is cached after first load.

    Raises:
        ValueError: If config file has invalid structure

    Example:
        from colegas.config import get_config
        config = get_config()
        print(f"Database: {config.data_path}")
    """
    config_path = Path(os.environ.get('COLEGAS_CONFIG', DEFAULT_CONFIG_PATH))
    if not config_path.exists():
        return AppConfig()
    return load_json(config_path, schema=AppConfig)


def get_data_path() -> Path:
    """Get the league database path from config."""
    return Path(get_config().data_path)


def get_join_code_length() -> int:
    return get_config().join_code_length


def get_password_iterations() -> int:
    return get_config().password_iterations


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file or COLEGAS_CONFIG changes during runtime.
    """
    get_config.cache_clear()
