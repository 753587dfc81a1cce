"""TOML configuration loader with deep merge support.

Files are layered in this order, later files winning key by key:

1. config/default.toml (required once a config dir is found)
2. config/{ROLLCALL_ENV}.toml (optional)
3. config/local.toml (optional, per-site: form links, team aliases)

When Rollcall runs as an installed library with no config dir anywhere
above the working directory, the loader returns an empty mapping and the
pydantic defaults apply.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from rollcall.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_ENV = "ROLLCALL_CONFIG_DIR"
ENVIRONMENT_ENV = "ROLLCALL_ENV"
LOCAL_CONFIG_FILE = "local.toml"

# Upward search depth for a config/ directory
_SEARCH_DEPTH = 5


def get_config_dir(start: Path | None = None) -> Path | None:
    """Get the configuration directory path.

    ROLLCALL_CONFIG_DIR wins when set. Otherwise config/ is searched for in
    ``start`` (default: the working directory) and its parents.

    Args:
        start: Directory to begin the upward search from

    Returns:
        The config directory, or None when none was found

    Raises:
        FileNotFoundError: If ROLLCALL_CONFIG_DIR points at a missing path
    """
    config_dir_env = os.environ.get(CONFIG_DIR_ENV)
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    current = start or Path.cwd()
    for _ in range(_SEARCH_DEPTH):
        config_path = current / "config"
        if (config_path / "default.toml").exists():
            return config_path
        if current.parent == current:
            break
        current = current.parent

    return None


def get_environment() -> str:
    """Get the current environment from ROLLCALL_ENV.

    Defaults to 'development' if not set.
    """
    return os.environ.get(ENVIRONMENT_ENV, "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Args:
        file_path: Path to the TOML file

    Returns:
        Dictionary containing the TOML data

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Tables merge recursively, so an environment file can change one link
    under [onboarding.links] without restating the others. Any other value
    in override replaces the base value.

    Args:
        base: Base dictionary
        override: Override dictionary (takes precedence)

    Returns:
        Merged dictionary; neither input is modified
    """
    result = base.copy()

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(config_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML files.

    Args:
        config_dir: Directory holding the TOML files; defaults to
            get_config_dir()

    Returns:
        Merged configuration dictionary, empty when no config dir exists

    Raises:
        FileNotFoundError: If a config dir was given or configured but has
            no default.toml
    """
    config_dir = config_dir or get_config_dir()
    if config_dir is None:
        logger.debug("config_dir_not_found", cwd=str(Path.cwd()))
        return {}

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_ENV}."
        )

    config = load_toml(default_path)
    loaded = [default_path.name]

    env = get_environment()
    for overlay in (config_dir / f"{env}.toml", config_dir / LOCAL_CONFIG_FILE):
        if overlay.exists():
            config = deep_merge(config, load_toml(overlay))
            loaded.append(overlay.name)

    logger.debug("config_loaded", config_dir=str(config_dir), environment=env, files=loaded)
    return config
