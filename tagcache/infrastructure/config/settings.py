"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.tagcache/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from tagcache.domain.models.common import CacheStorageType

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".tagcache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_STORAGE_DIR = DEFAULT_CONFIG_DIR / "storage"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "TAGCACHE_"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(
    config_file: Path = DEFAULT_CONFIG_FILE,
    env_file: Optional[Path] = None,
    reload: bool = False,
) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
        reload: Load again even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not reload:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
        else:
            logger.debug(f"Nothing loaded from .env file: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (path not found).")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.info("Configuration loading process completed.")


def _flatten(data: Dict[str, Any], parent: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('cache.storage')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{parent}.{key}" if parent else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def _env_value(key: str) -> Optional[str]:
    env_key = key.upper().replace('.', '_')
    for name in (ENV_PREFIX + env_key, env_key):
        if name in os.environ:
            return os.environ[name]
    return None


def _coerce(value: str) -> Any:
    # Try to convert common types
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (TAGCACHE_CACHE_STORAGE or CACHE_STORAGE for 'cache.storage')
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_value = _env_value(key)
    if env_value is not None:
        return _coerce(env_value)

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the running process.

    Args:
        key: Configuration key (e.g., 'cache.storage')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value}")
    _config[key] = value


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_storage_type() -> CacheStorageType:
    """Gets the storage medium for the command line cache.

    Raises:
        ValueError: If the configured name is not a known storage type.
    """
    name = get_config('cache.storage', CacheStorageType.LOCAL_STORAGE.value)
    return CacheStorageType(str(name).lower())


def get_storage_dir() -> Path:
    """Gets the directory of the durable storage."""
    directory = get_config('cache.dir')
    return Path(directory).expanduser() if directory else DEFAULT_STORAGE_DIR


def get_default_max_age() -> Optional[int]:
    """Gets the default entry lifetime in seconds, or None for entries that never expire."""
    max_age = get_config('cache.default_max_age')
    if max_age is None or max_age == "":
        return None
    try:
        return int(max_age)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid cache.default_max_age value: {max_age!r}")
        return None


def get_logging_settings() -> Dict[str, Any]:
    """Gets level name, format and optional file for logging setup."""
    return {
        'level': str(get_config('logging.level', 'WARNING')).upper(),
        'format': get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        'file': get_config('logging.file'),
    }


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
