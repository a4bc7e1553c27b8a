"""Configuration management for the genesis submission audit.

Example usage:
    from gentx_audit.config import load_config

    config = load_config()
    repository = config.github.repository
"""

from .exceptions import (
    ConfigurationError,
    ConfigurationFileError,
    ConfigurationValidationError,
)
from .loader import ConfigurationLoader, load_config
from .models import (
    Config,
    DenominationConfig,
    GitHubConfig,
    LogLevel,
    SubmissionConfig,
    SystemConfig,
)

__all__ = [
    "Config",
    "ConfigurationError",
    "ConfigurationFileError",
    "ConfigurationLoader",
    "ConfigurationValidationError",
    "DenominationConfig",
    "GitHubConfig",
    "LogLevel",
    "SubmissionConfig",
    "SystemConfig",
    "load_config",
]
