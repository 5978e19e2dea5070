"""Sanity Gate error system.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages
- Recovery hints shown by the CLI
- Context for debugging

Only path validation and unexpected engine failures raise. Analyzer failures
never surface here; the engine logs them and moves on.
"""

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        1xxx - Input validation errors
        2xxx - Filesystem errors
        3xxx - Security policy errors
        9xxx - Unexpected failures
    """

    VALIDATION_ERROR = 1001
    FILE_TOO_LARGE = 1002

    PATH_NOT_FOUND = 2001
    PERMISSION_DENIED = 2002

    SECURITY_ERROR = 3001

    UNKNOWN_ERROR = 9001

    @property
    def category(self) -> str:
        """Get the error category name."""
        return {
            1: "validation",
            2: "filesystem",
            3: "security",
        }.get(self.value // 1000, "unknown")

    @property
    def aborts_scan(self) -> bool:
        """Whether this error stops a scan before any analyzer runs."""
        return self in {
            ErrorCode.VALIDATION_ERROR,
            ErrorCode.PATH_NOT_FOUND,
            ErrorCode.PERMISSION_DENIED,
            ErrorCode.SECURITY_ERROR,
        }


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "Invalid path: {detail}",
    ErrorCode.FILE_TOO_LARGE: "File is too large to preview ({size} bytes, limit {limit}).",
    ErrorCode.PATH_NOT_FOUND: "Path does not exist: {path}",
    ErrorCode.PERMISSION_DENIED: "Permission denied: {path}",
    ErrorCode.SECURITY_ERROR: "Access denied: {detail}",
    ErrorCode.UNKNOWN_ERROR: "Scan failed unexpectedly: {detail}",
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.PATH_NOT_FOUND: [
        "Check the path for typos",
        "Pass an existing project directory",
    ],
    ErrorCode.PERMISSION_DENIED: [
        "Check read permissions on {path}",
    ],
    ErrorCode.SECURITY_ERROR: [
        "Scan a directory inside the workspace root",
        "Unset SANITY_GATE_ENFORCE_ROOT to disable confinement",
        "Scan the symlink target directly instead of the link",
    ],
    ErrorCode.FILE_TOO_LARGE: [
        "Open the file in an editor instead",
    ],
    ErrorCode.UNKNOWN_ERROR: [
        "Re-run with --debug for the full traceback",
    ],
}


class SanityGateError(Exception):
    """Base error type for all Sanity Gate errors.

    Example:
        >>> err = SanityGateError(ErrorCode.PATH_NOT_FOUND, {"path": "/missing"})
        >>> print(err)
        [SG-2001] Path does not exist: /missing
        >>> err.kind
        'PATH_NOT_FOUND'
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def kind(self) -> str:
        """Symbolic error kind, e.g. ``SECURITY_ERROR``."""
        return self.code.name

    @property
    def category(self) -> str:
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'SG-3001')."""
        return f"SG-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"SanityGateError(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging and JSON output."""
        return {
            "error_id": self.error_id,
            "kind": self.kind,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recovery_hints": self.recovery_hints,
            "context": self.context,
        }


# Convenience factory functions

def validation_error(detail: str, **extra: Any) -> SanityGateError:
    """Create a VALIDATION_ERROR."""
    return SanityGateError(ErrorCode.VALIDATION_ERROR, {"detail": detail, **extra})


def security_error(detail: str, **extra: Any) -> SanityGateError:
    """Create a SECURITY_ERROR."""
    return SanityGateError(ErrorCode.SECURITY_ERROR, {"detail": detail, **extra})


def unknown_error(cause: Exception) -> SanityGateError:
    """Wrap an unexpected exception as UNKNOWN_ERROR."""
    return SanityGateError(
        ErrorCode.UNKNOWN_ERROR,
        {"detail": str(cause) or type(cause).__name__},
        cause=cause,
    )
