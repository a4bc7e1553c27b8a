"""
Shared test configuration and fixtures.

Provides pytest fixtures for the GitHub mock and a configuration isolated
from the developer's environment.
"""

from collections.abc import Generator

import pytest
from aioresponses import aioresponses

from gentx_audit.config.models import Config


@pytest.fixture
def mock_github() -> Generator[aioresponses, None, None]:
    """
    Intercept every aiohttp request made during the test.

    Why: Tests must never reach the real GitHub API
    What: Provides an active aioresponses instance
    How: Registered responses are consumed in order; unmatched requests fail
    """
    with aioresponses() as mocked:
        yield mocked


@pytest.fixture
def audit_config() -> Config:
    """
    Configuration for pipeline tests.

    Why: Tests should not pick up a token or repository from the shell
    What: Provides a Config for cosmos/launch without retries
    How: Builds the models directly, bypassing the loader
    """
    return Config(
        github={
            "repository": "cosmos/launch",
            "access_token": "test_token",
            "max_retries": 0,
        }
    )
