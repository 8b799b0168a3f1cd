"""
Custom Exceptions.

CLI-specific exception classes for consistent error handling.

Callers receive a single human-readable message. The code attribute is
kept for logging; programmatic distinction is done on message prefixes:
    "Yunxiao API <status>:", "Yunxiao API business error:",
    "Request timeout after", "Request failed:", "Failed to"
"""

from typing import Any


class CliError(Exception):
    """Base exception for all CLI errors."""

    def __init__(self, message: str, code: str = "CLI_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigError(CliError):
    """Raised when the config file cannot be read or fails validation."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")


class MissingTokenError(CliError):
    """Raised when no access token is available from config or environment."""

    def __init__(
        self,
        message: str = "Missing token. Set auth.token in the config file or export YUNXIAO_ACCESS_TOKEN.",
    ) -> None:
        super().__init__(message, code="AUTH_MISSING_TOKEN")


class ApiRequestError(CliError):
    """Raised when a request ends in a failure outcome."""

    def __init__(self, message: str, outcome: Any = None) -> None:
        self.outcome = outcome
        super().__init__(message, code="API_REQUEST_FAILED")


class FallbackExhaustedError(CliError):
    """Raised when every candidate endpoint was unavailable."""

    def __init__(self, message: str, last_error: CliError | None = None) -> None:
        self.last_error = last_error
        super().__init__(message, code="API_FALLBACK_EXHAUSTED")
