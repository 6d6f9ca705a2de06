"""Exceptions raised by the gitguard.auth module.

Exception hierarchy::

    GitGuardError
        AuthError (base for all authentication errors)
            NetworkError (gateway unreachable)
            GatewayError (non-2xx response)
                AuthExpiredError (stored token rejected, HTTP 401)
                InvalidCredentialsError (password login rejected)
                RateLimitError (HTTP 429)
            NotAuthenticatedError (no token stored)
            DeviceAuthError (recoverable device-auth failure)
                AuthTimeoutError (client-side ceiling reached)
                AuthRequestExpiredError (server expired the request)
            ManualTokenRejectedError (fallback token has the wrong shape)
"""

from __future__ import annotations

from http import HTTPStatus

from gitguard.exceptions import GitGuardError


class AuthError(GitGuardError):
    """Base exception for all authentication errors."""


class NetworkError(AuthError):
    """The remote service could not be reached.

    Attributes:
        url: URL of the failed request, when known.
    """

    def __init__(self, message: str, *, url: str | None = None) -> None:
        """Initialize NetworkError.

        Args:
            message: Human-readable error message.
            url: URL of the failed request.
        """
        super().__init__(message, details={"url": url})
        self.url = url


class GatewayError(AuthError):
    """The remote service answered with a non-success status.

    Attributes:
        status_code: HTTP status code.
        server_message: ``message`` field of the JSON body, when present.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        server_message: str | None = None,
    ) -> None:
        """Initialize GatewayError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            server_message: Message supplied by the server, if any.
        """
        super().__init__(
            message,
            details={"status_code": status_code, "server_message": server_message},
        )
        self.status_code = status_code
        self.server_message = server_message

    @property
    def gone(self) -> bool:
        """Return True when the server signalled the resource is gone (410)."""
        return self.status_code == HTTPStatus.GONE


class AuthExpiredError(GatewayError):
    """The server rejected a previously stored token.

    Examples:
        >>> err = AuthExpiredError()
        >>> err.status_code
        401
    """

    def __init__(self, server_message: str | None = None) -> None:
        """Initialize AuthExpiredError.

        Args:
            server_message: Message supplied by the server, if any.
        """
        super().__init__(
            "Authentication expired. Please login again.",
            status_code=HTTPStatus.UNAUTHORIZED.value,
            server_message=server_message,
        )


class InvalidCredentialsError(GatewayError):
    """Email/password login was rejected by the server."""

    def __init__(self, status_code: int, server_message: str | None = None) -> None:
        """Initialize InvalidCredentialsError.

        Args:
            status_code: HTTP status code of the rejection.
            server_message: Message supplied by the server, if any.
        """
        super().__init__(
            server_message or "Invalid email or password",
            status_code=status_code,
            server_message=server_message,
        )


class RateLimitError(GatewayError):
    """The server refused the request because a quota was exhausted."""

    def __init__(self, server_message: str | None = None) -> None:
        """Initialize RateLimitError.

        Args:
            server_message: Message supplied by the server, if any.
        """
        super().__init__(
            "Rate limit exceeded",
            status_code=HTTPStatus.TOO_MANY_REQUESTS.value,
            server_message=server_message,
        )


class NotAuthenticatedError(AuthError):
    """A command needs a stored token and none is present."""

    def __init__(self) -> None:
        """Initialize NotAuthenticatedError."""
        super().__init__("Not authenticated")


class DeviceAuthError(AuthError):
    """Recoverable failure of the automatic device-auth path.

    Attributes:
        reason: Either ``"timeout"`` or ``"expired"``.
    """

    reason = "failed"


class AuthTimeoutError(DeviceAuthError):
    """Polling exceeded the client-side ceiling without completion.

    Attributes:
        timeout: The ceiling in seconds.
    """

    reason = "timeout"

    def __init__(self, timeout: float) -> None:
        """Initialize AuthTimeoutError.

        Args:
            timeout: The ceiling in seconds.
        """
        super().__init__(
            "Authentication timeout",
            details={"timeout": timeout},
        )
        self.timeout = timeout


class AuthRequestExpiredError(DeviceAuthError):
    """The server invalidated the device-auth request before completion.

    Attributes:
        request_code: Code of the expired request.
    """

    reason = "expired"

    def __init__(self, request_code: str) -> None:
        """Initialize AuthRequestExpiredError.

        Args:
            request_code: Code of the expired request.
        """
        super().__init__(
            "Authentication expired",
            details={"request_code": request_code},
        )
        self.request_code = request_code


class ManualTokenRejectedError(AuthError):
    """A manually pasted token does not have the expected shape.

    Attributes:
        original: The timeout or expiry error that triggered manual entry.
    """

    def __init__(self, original: DeviceAuthError) -> None:
        """Initialize ManualTokenRejectedError.

        Args:
            original: The timeout or expiry error that triggered manual entry.
        """
        super().__init__(
            "Manual token rejected",
            details={"reason": original.reason},
        )
        self.original = original


__all__ = [
    "AuthError",
    "AuthExpiredError",
    "AuthRequestExpiredError",
    "AuthTimeoutError",
    "DeviceAuthError",
    "GatewayError",
    "InvalidCredentialsError",
    "ManualTokenRejectedError",
    "NetworkError",
    "NotAuthenticatedError",
    "RateLimitError",
]
