"""Service-specific error codes and exception types for Shortcut Gate."""

from __future__ import annotations

from typing import Any

# Security rejections
UNKNOWN_METHOD = "UNKNOWN_METHOD"
UNKNOWN_TOOL = "UNKNOWN_TOOL"
SHORTCUT_BLOCKED = "SHORTCUT_BLOCKED"
SYSTEM_SHORTCUT_BLOCKED = "SYSTEM_SHORTCUT_BLOCKED"
PREFIX_NOT_ALLOWED = "PREFIX_NOT_ALLOWED"
INPUT_TOO_LARGE = "INPUT_TOO_LARGE"
POTENTIALLY_DANGEROUS_CONTENT = "POTENTIALLY_DANGEROUS_CONTENT"

# Execution outcomes
SHORTCUT_NOT_FOUND = "SHORTCUT_NOT_FOUND"
EXECUTION_ERROR = "EXECUTION_ERROR"
EXECUTION_TIMEOUT = "EXECUTION_TIMEOUT"
CATALOG_UNAVAILABLE = "CATALOG_UNAVAILABLE"

# Startup
ENVIRONMENT_ERROR = "ENVIRONMENT_ERROR"


class ShortcutGateError(Exception):
    """Base exception for Shortcut Gate failures."""

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class CatalogUnavailableError(ShortcutGateError):
    """Raised when shortcut discovery through the CLI fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(CATALOG_UNAVAILABLE, message, details)


class InvocationError(ShortcutGateError):
    """Raised when the shortcuts CLI cannot be started or exits with an error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(EXECUTION_ERROR, message, details)


class InvocationTimeoutError(ShortcutGateError):
    """Raised when a shortcut invocation exceeds its allotted time."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(EXECUTION_TIMEOUT, message, details)


class ShortcutsEnvironmentError(ShortcutGateError):
    """Raised at startup when the host cannot run shortcuts at all."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(
            ENVIRONMENT_ERROR,
            "Shortcuts environment validation failed: " + "; ".join(errors),
            {"errors": list(errors)},
        )
        self.errors = list(errors)
