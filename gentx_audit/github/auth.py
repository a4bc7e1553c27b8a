"""GitHub authentication handlers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .exceptions import GitHubAuthenticationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PARAM = "access_token"  # nosec B105


@dataclass(frozen=True)
class AuthToken:
    """Access credential and the two ways of attaching it to a request."""

    token: str
    token_type: str = "token"

    def to_header(self) -> dict[str, str]:
        """Convert to authorization header."""
        return {"Authorization": f"{self.token_type} {self.token}"}

    def to_params(self) -> dict[str, str]:
        """Convert to the ``access_token`` query parameter."""
        return {ACCESS_TOKEN_PARAM: self.token}

    def __repr__(self) -> str:
        return f"AuthToken(token='***', token_type={self.token_type!r})"


class AuthProvider(ABC):
    """Abstract base class for authentication providers."""

    @abstractmethod
    async def get_token(self) -> AuthToken | None:
        """Get authentication token, None for anonymous access."""
        pass


class AccessTokenAuth(AuthProvider):
    """Personal access token read once at startup."""

    def __init__(self, token: str):
        """Initialize token authentication.

        Args:
            token: GitHub access token
        """
        if not token or not token.strip():
            raise GitHubAuthenticationError("Access token is required")
        self._token = AuthToken(token=token.strip())

    async def get_token(self) -> AuthToken:
        """Get authentication token."""
        return self._token


class AnonymousAuth(AuthProvider):
    """No credential; requests are subject to the unauthenticated rate limit."""

    async def get_token(self) -> None:
        return None


def auth_from_token(token: str | None) -> AuthProvider:
    """Build the provider for an optional token."""
    if token and token.strip():
        return AccessTokenAuth(token)
    logger.warning(
        "No GitHub access token configured, using unauthenticated requests"
    )
    return AnonymousAuth()
