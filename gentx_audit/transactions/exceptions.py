"""Transaction codec exceptions."""

from typing import Any


class TransactionError(Exception):
    """Base exception for transaction decoding and validation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class TransactionDecodeError(TransactionError):
    """Raised when bytes cannot be decoded into a transaction or message."""

    pass


class MessageValidationError(TransactionError):
    """Raised when a decoded message fails structural validation."""

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            code: Short machine-readable reason, e.g. ``bad_delegation_amount``
            details: Optional dictionary with additional error details
        """
        super().__init__(message, details)
        self.code = code
