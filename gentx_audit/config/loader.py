"""Configuration loading.

The loading hierarchy is:
1. Default values from Pydantic models
2. Configuration file (YAML)
3. Environment variables
4. Runtime overrides (command line)

The result is built once at startup and handed to every component that needs
it; there is no module-level configuration instance.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationFileError, ConfigurationValidationError
from .models import Config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "gentx-audit.yaml"
CONFIG_PATH_ENV = "GENTX_AUDIT_CONFIG_PATH"

# environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "GITHUB_API_TOKEN": ("github", "access_token"),
    "GENTX_AUDIT_REPOSITORY": ("github", "repository"),
    "GENTX_AUDIT_LOG_LEVEL": ("system", "log_level"),
}


def _set_path(data: dict[str, Any], section: str, key: str, value: Any) -> None:
    target = data.setdefault(section, {})
    if not isinstance(target, dict):
        raise ConfigurationValidationError(
            f"Configuration section '{section}' must be a mapping"
        )
    target[key] = value


class ConfigurationLoader:
    """Handles loading and validation of configuration from various sources."""

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        """Initialize configuration loader.

        Args:
            environ: Environment to read overrides from, ``os.environ`` if None
        """
        self.environ = environ if environ is not None else dict(os.environ)
        self.config_file_path: Path | None = None

    def read_file(self, config_path: str | Path) -> dict[str, Any]:
        """Read a YAML configuration file into a dictionary.

        Raises:
            ConfigurationFileError: If file cannot be read or parsed
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationFileError(
                f"Configuration file not found: {config_path}", str(config_path)
            )

        if not config_path.is_file():
            raise ConfigurationFileError(
                f"Configuration path is not a file: {config_path}", str(config_path)
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationFileError(
                f"Failed to parse YAML configuration: {e}", str(config_path)
            ) from e
        except OSError as e:
            raise ConfigurationFileError(
                f"Failed to read configuration file: {e}", str(config_path)
            ) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigurationFileError(
                "Configuration file must contain a mapping", str(config_path)
            )

        self.config_file_path = config_path.resolve()
        return config_data

    def find_config_file(self, filename: str = DEFAULT_CONFIG_FILENAME) -> Path | None:
        """Find configuration file in standard locations.

        Search order:
        1. GENTX_AUDIT_CONFIG_PATH environment variable
        2. Current working directory
        """
        search_paths = []

        env_path_str = self.environ.get(CONFIG_PATH_ENV)
        if env_path_str:
            env_path = Path(env_path_str)
            search_paths.append(env_path if env_path.suffix else env_path / filename)

        search_paths.append(Path.cwd() / filename)

        for path in search_paths:
            if path.is_file():
                return path

        return None

    def apply_environment(self, data: dict[str, Any]) -> dict[str, Any]:
        """Overlay the recognised environment variables."""
        merged = copy.deepcopy(data)
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value is not None and value != "":
                _set_path(merged, section, key, value)
        return merged

    def load_from_dict(self, config_data: dict[str, Any]) -> Config:
        """Validate a configuration dictionary.

        Raises:
            ConfigurationValidationError: If configuration validation fails
        """
        try:
            return Config(**config_data)
        except (ValidationError, ValueError) as e:
            errors = e.errors(include_url=False) if isinstance(e, ValidationError) else []
            raise ConfigurationValidationError(
                f"Configuration validation failed: {e}", validation_errors=errors
            ) from e

    def load(
        self,
        config_path: str | Path | None = None,
        overrides: dict[str, dict[str, Any]] | None = None,
        auto_discover: bool = True,
    ) -> Config:
        """Load configuration from every source.

        Args:
            config_path: Explicit path to configuration file
            overrides: ``{section: {field: value}}`` applied last
            auto_discover: Look for a configuration file when no path is given

        Returns:
            Validated configuration
        """
        data: dict[str, Any] = {}
        if config_path is not None:
            data = self.read_file(config_path)
        elif auto_discover:
            found = self.find_config_file()
            if found is not None:
                data = self.read_file(found)

        data = self.apply_environment(data)
        for section, values in (overrides or {}).items():
            for key, value in values.items():
                if value is not None:
                    _set_path(data, section, key, value)

        config = self.load_from_dict(data)
        logger.debug(
            f"Configuration loaded (file={self.config_file_path}, "
            f"repository={config.github.repository})"
        )
        return config


def load_config(
    config_path: str | Path | None = None,
    overrides: dict[str, dict[str, Any]] | None = None,
    auto_discover: bool = True,
) -> Config:
    """Load configuration from file, environment and overrides."""
    return ConfigurationLoader().load(config_path, overrides, auto_discover)
