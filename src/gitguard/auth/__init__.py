"""Authentication core of the gitguard CLI.

This module manages the single local session every command depends on:

- ``CredentialStore`` persists the session record with owner-only permissions
- ``HttpAuthGateway`` talks to the remote auth endpoints
- ``DeviceAuthPoller`` drives the browser-based login handshake
- ``SessionManager`` composes them into login, logout and whoami

Examples:
    >>> from gitguard.auth import CredentialStore, HttpAuthGateway, SessionManager
    >>> store = CredentialStore()  # doctest: +SKIP
    >>> with HttpAuthGateway(store) as gateway:  # doctest: +SKIP
    ...     profile = SessionManager(store, gateway).whoami()
"""

from gitguard.auth.errors import (
    AuthError,
    AuthExpiredError,
    AuthRequestExpiredError,
    AuthTimeoutError,
    DeviceAuthError,
    GatewayError,
    InvalidCredentialsError,
    ManualTokenRejectedError,
    NetworkError,
    NotAuthenticatedError,
    RateLimitError,
)
from gitguard.auth.gateway import AuthGateway, HttpAuthGateway
from gitguard.auth.models import (
    DeviceAuthRequest,
    LoginResponse,
    LogoutResult,
    PollerState,
    PollResult,
    PollStatus,
    Preferences,
    Profile,
    ScanLimits,
    SessionRecord,
    Tier,
)
from gitguard.auth.poller import DeviceAuthPoller, has_timed_out, is_token_shaped
from gitguard.auth.session import SessionManager
from gitguard.auth.store import CredentialStore

__all__ = [
    "AuthError",
    "AuthExpiredError",
    "AuthGateway",
    "AuthRequestExpiredError",
    "AuthTimeoutError",
    "CredentialStore",
    "DeviceAuthError",
    "DeviceAuthPoller",
    "DeviceAuthRequest",
    "GatewayError",
    "HttpAuthGateway",
    "InvalidCredentialsError",
    "LoginResponse",
    "LogoutResult",
    "ManualTokenRejectedError",
    "NetworkError",
    "NotAuthenticatedError",
    "PollResult",
    "PollStatus",
    "PollerState",
    "Preferences",
    "Profile",
    "RateLimitError",
    "ScanLimits",
    "SessionManager",
    "SessionRecord",
    "Tier",
    "has_timed_out",
    "is_token_shaped",
]
