"""Root exception for the gitguard package.

Every error raised on purpose by gitguard derives from ``GitGuardError`` so
commands can catch the whole family at their boundary and turn it into a
message plus a non-zero exit code.
"""

from __future__ import annotations

from typing import Any


class GitGuardError(Exception):
    """Base exception for all gitguard errors.

    Attributes:
        message: Human-readable error message.
        details: Additional error context as key-value pairs.

    Examples:
        >>> raise GitGuardError("Something went wrong", details={"path": "/tmp"})
        Traceback (most recent call last):
        ...
        gitguard.exceptions.GitGuardError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize GitGuardError.

        Args:
            message: Human-readable error message.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PersistenceError(GitGuardError):
    """Raised when the local credential store cannot be written.

    No command can proceed without a writable store, so this error is
    never converted into a default.

    Attributes:
        path: File or directory that could not be written.
        reason: Underlying OS error text.
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize PersistenceError.

        Args:
            path: File or directory that could not be written.
            reason: Underlying OS error text.
        """
        super().__init__(
            f"Cannot write credential store at '{path}': {reason}",
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class ScanError(GitGuardError):
    """Raised when the scan glue cannot build or submit a scan."""


__all__ = [
    "GitGuardError",
    "PersistenceError",
    "ScanError",
]
