"""Configuration management for getcli.

Configuration Discovery Precedence (Highest to Lowest Priority):
===============================================================

1. **--config Command-Line Option** (Highest Priority)
   - Path to a specific configuration file

2. **GET_CONFIG_DIR Environment Variable**
   - Looks for: `${GET_CONFIG_DIR}/config.yaml`, then `config.json`

3. **XDG_CONFIG_HOME Environment Variable**
   - Looks for: `${XDG_CONFIG_HOME}/get/config.yaml`, then `config.json`

4. **~/.config/get Directory** (Fallback)
   - Looks for: `~/.config/get/config.yaml`, then `config.json`

If neither file exists, default configuration is applied.
Environment variables prefixed with `GET_` (e.g. `GET_FALLBACK_HOSTNAME`)
override the defaults but not values set in the file.

Example config.yaml (a JSON object works too):
--------
fallback_hostname: localhost
http_hostnames:
  - localhost
  - 127.0.0.1
timeout: 10
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from getcli.errors import ConfigError
from getcli.types import LogLevel

logger = logging.getLogger(__name__)

# Searched in order; the first one that exists is used
CONFIG_FILENAMES = ("config.yaml", "config.json")


class GetConfig(BaseSettings):
    """Main configuration for getcli that reads from config.yaml."""

    model_config = SettingsConfigDict(
        env_prefix="GET_",
        case_sensitive=False,
        extra="ignore",
    )

    # Hostname used when the URL starts with a port, e.g. ":8080/foo"
    fallback_hostname: str = "localhost"

    # Hostnames reached over plain http when no scheme is given
    http_hostnames: list[str] = Field(default_factory=lambda: ["localhost"])

    log_level: LogLevel = "WARNING"

    # Request timeout in seconds
    timeout: float = 30.0

    # Path the configuration was loaded from, if any
    config_path: Path | None = None

    @classmethod
    def from_file(cls, path: Path, **kwargs: Any) -> "GetConfig":
        """Load configuration from a YAML (or JSON) file.

        Args:
            path: Path to the configuration file
            **kwargs: Values that take precedence over the file

        Returns:
            GetConfig instance, with defaults when the file does not exist

        Raises:
            ConfigError: If the file cannot be read or holds invalid values
        """
        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")
            return cls(config_path=path, **kwargs)

        try:
            with path.open() as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        try:
            config = cls(**{**data, "config_path": path, **kwargs})
        except ValidationError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

        logger.debug(f"Loaded config from {path}")
        return config


def get_config_dir() -> Path:
    """Get the directory holding the config file."""
    env_config_dir = os.environ.get("GET_CONFIG_DIR")
    if env_config_dir:
        return Path(env_config_dir)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "get"

    return Path.home() / ".config" / "get"


def find_config_file(config_dir: Path) -> Path:
    """Return the config file in ``config_dir``, or the config.yaml path if none exists."""
    for name in CONFIG_FILENAMES:
        path = config_dir / name
        if path.exists():
            return path
    return config_dir / CONFIG_FILENAMES[0]


# Global configuration instance
_config_instance: GetConfig | None = None


def get_config() -> GetConfig:
    """Get the configuration instance, discovering it on first use."""
    global _config_instance

    if _config_instance is None:
        config_path = find_config_file(get_config_dir())
        logger.debug(f"Discovered config path: {config_path}")
        _config_instance = GetConfig.from_file(config_path)

    return _config_instance


def set_config_instance(config: GetConfig) -> None:
    """Set the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = config


def clear_config_instance() -> None:
    """Clear the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = None
