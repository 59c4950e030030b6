"""Configuration hierarchy: merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.platecache/config.yaml)
  3. Project config   (./platecache.yaml)
  4. Environment variables (PLATECACHE_*)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from platecache.config.defaults import get_defaults
from platecache.errors.exceptions import ConfigError

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".platecache" / "config.yaml"
_PROJECT_CONFIG_NAME = "platecache.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "PLATECACHE_MAX_SIZE": "max_size",
    "PLATECACHE_TTL_HOURS": "ttl_hours",
    "PLATECACHE_PERSISTENCE_DISABLED": "persistence_disabled",
    "PLATECACHE_PERSISTENCE_FILE": "persistence_file",
    "PLATECACHE_CLEANUP_INTERVAL_MINUTES": "cleanup_interval_minutes",
    "PLATECACHE_MAX_CONCURRENT_ANALYSES": "max_concurrent_analyses",
    "PLATECACHE_LOG_LEVEL": "log_level",
}

# Keys that should be parsed as specific types
_TYPE_MAP: dict[str, type] = {
    "max_size": int,
    "ttl_hours": float,
    "cleanup_interval_minutes": float,
    "max_concurrent_analyses": int,
}

# Boolean env var values
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars())

    # Layer 5: Runtime arguments (highest priority)
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for platecache.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read PLATECACHE_* environment variables."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        try:
            result[config_key] = _coerce_env_value(config_key, value)
        except ValueError as e:
            raise ConfigError(
                f"Invalid value for {env_key}: {value!r} ({e})",
                source=env_key,
                value=value,
            ) from e
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type.

    Raises ValueError if the string is not a valid value for the key.
    """
    if key.endswith("_disabled"):
        normalized = value.strip().lower()
        if normalized in _TRUTHY:
            return True
        if normalized in _FALSY:
            return False
        raise ValueError(f"expected one of {sorted((_TRUTHY | _FALSY) - {''})}")

    target_type = _TYPE_MAP.get(key)
    if target_type:
        try:
            return target_type(value)
        except ValueError:
            raise ValueError(f"expected {target_type.__name__}") from None

    return value
