"""Pydantic configuration models for the genesis submission audit.

The configuration hierarchy follows this structure:
- Config: Root configuration
- SystemConfig: Logging settings
- GitHubConfig: Coordination repository, credential and transport settings
- SubmissionConfig: Label marker and candidate processing
- DenominationConfig: Minor/major unit conversion

Environment variables are substituted using the format ${VAR_NAME} with
optional defaults: ${VAR_NAME:default_value}
"""

import os
import re
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..github.rate_limiting import CANONICAL_RATE_LIMIT_DOCS
from ..transactions.coins import MAJOR_DENOM, MINOR_DENOM, MINOR_PER_MAJOR

ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseConfigModel(BaseModel):
    """Base configuration model with environment variable substitution."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",  # Prevent extra fields
    )

    @model_validator(mode="before")
    @classmethod
    def substitute_env_vars(cls, values: Any) -> Any:
        """Substitute environment variables in string values.

        Supports formats:
        - ${VAR_NAME} - Required environment variable
        - ${VAR_NAME:default} - Optional with default value

        Raises:
            ValueError: If required environment variable is missing
        """

        def replacer(match: re.Match[str]) -> str:
            var_name, default_value = match.group(1), match.group(2)
            env_value = os.getenv(var_name)
            if env_value is not None:
                return env_value
            if default_value is not None:
                return default_value
            raise ValueError(f"Required environment variable '{var_name}' not found")

        def substitute_value(value: Any) -> Any:
            if isinstance(value, str):
                return ENV_PATTERN.sub(replacer, value)
            if isinstance(value, dict):
                return {k: substitute_value(v) for k, v in value.items()}
            if isinstance(value, list):
                return [substitute_value(item) for item in value]
            return value

        if not isinstance(values, dict):
            return values
        return {key: substitute_value(value) for key, value in values.items()}


class SystemConfig(BaseConfigModel):
    """Core system configuration settings."""

    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="System-wide logging level"
    )

    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="logging.Formatter format string",
    )


class GitHubConfig(BaseConfigModel):
    """Coordination repository and GitHub transport configuration."""

    base_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )

    repository: str = Field(
        default="cosmos/launch", description="Repository receiving submissions"
    )

    access_token: str | None = Field(
        default=None, description="Access token, normally from GITHUB_API_TOKEN"
    )

    token_placement: Literal["query", "header"] = Field(
        default="query",
        description="Send the token as access_token query parameter or header",
    )

    pull_state: Literal["open", "closed", "all"] = Field(
        default="open", description="Pull request state to list"
    )

    per_page: int | None = Field(
        default=None, ge=1, le=100, description="Listing page size, API default if unset"
    )

    max_pages: int | None = Field(
        default=None,
        ge=1,
        description="Abort the run if the listing has more than this many pages",
    )

    timeout: int = Field(
        default=30, ge=1, le=300, description="Request timeout in seconds"
    )

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for connection errors, timeouts and 5xx responses",
    )

    retry_backoff_factor: float = Field(
        default=2.0, ge=0.0, le=60.0, description="Backoff base in seconds"
    )

    user_agent: str = Field(default="gentx-audit/0.1", description="User-Agent header")

    rate_limit_documentation_urls: list[str] = Field(
        default_factory=lambda: list(CANONICAL_RATE_LIMIT_DOCS),
        description="documentation_url values that signal the rate limit",
    )

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Validate ``owner/name`` format."""
        parts = v.strip().strip("/").split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError("Repository must be given as 'owner/name'")
        return "/".join(parts)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("GitHub base URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("access_token")
    @classmethod
    def blank_token_as_none(cls, v: str | None) -> str | None:
        if v is None or v.strip() == "":
            return None
        return v.strip()


class SubmissionConfig(BaseConfigModel):
    """Which pull requests are submissions and how they are processed."""

    label: str = Field(
        default="gentx",
        min_length=1,
        description="Label marking a pull request as a genesis submission",
    )

    max_concurrency: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Candidates validated at once; 1 keeps processing sequential",
    )


class DenominationConfig(BaseConfigModel):
    """Minor to major unit conversion."""

    minor: str = Field(default=MINOR_DENOM, description="Denomination on the wire")
    major: str = Field(default=MAJOR_DENOM, description="Denomination reported")
    scale: int = Field(
        default=MINOR_PER_MAJOR, ge=1, description="Minor units per major unit"
    )


class Config(BaseConfigModel):
    """Root configuration containing all subsystem configurations."""

    system: SystemConfig = Field(
        default_factory=SystemConfig, description="Core system configuration"
    )

    github: GitHubConfig = Field(
        default_factory=GitHubConfig, description="GitHub configuration"
    )

    submissions: SubmissionConfig = Field(
        default_factory=SubmissionConfig, description="Submission processing"
    )

    denomination: DenominationConfig = Field(
        default_factory=DenominationConfig, description="Unit conversion"
    )
