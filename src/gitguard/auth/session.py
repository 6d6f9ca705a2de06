"""Login, logout and whoami orchestration.

``SessionManager`` composes the credential store, the remote gateway and the
device-auth poller. It holds no global state: the CLI builds one per command
and tests inject fakes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from gitguard.auth.errors import AuthExpiredError, NotAuthenticatedError
from gitguard.auth.models import LogoutResult
from gitguard.auth.poller import DeviceAuthPoller
from gitguard.config import PENDING_IDENTITY, api_url_override
from gitguard.exceptions import GitGuardError

if TYPE_CHECKING:
    from gitguard.auth.errors import DeviceAuthError
    from gitguard.auth.gateway import AuthGateway
    from gitguard.auth.models import DeviceAuthRequest, LoginResponse, Profile
    from gitguard.auth.store import CredentialStore

logger = logging.getLogger(__name__)


def apply_endpoint_override(store: CredentialStore) -> str | None:
    """Persist the ``GITGUARD_API_URL`` override into the session record.

    Returns:
        The override, or None when the variable is unset.
    """
    override = api_url_override()
    if override and store.read().endpoint != override:
        store.update(endpoint=override)
    return override


class SessionManager:
    """Authentication lifecycle of the local session.

    Args:
        store: Credential store holding the session record.
        gateway: Remote auth endpoints.
        poller_factory: Builds the device-auth poller (default: ``DeviceAuthPoller``
            with production timings). Extra keyword arguments are forwarded.

    Example:
        >>> manager = SessionManager(store, gateway)  # doctest: +SKIP
        >>> profile = manager.login(prompt=lambda: input("Token: "))  # doctest: +SKIP
    """

    def __init__(
        self,
        store: CredentialStore,
        gateway: AuthGateway,
        *,
        poller_factory: Callable[..., DeviceAuthPoller] = DeviceAuthPoller,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._poller_factory = poller_factory
        self._poller: DeviceAuthPoller | None = None

    @property
    def store(self) -> CredentialStore:
        """Return the credential store."""
        return self._store

    @property
    def poller(self) -> DeviceAuthPoller | None:
        """Return the poller of the last device login, if any."""
        return self._poller

    def is_authenticated(self) -> bool:
        """Return True when a token is stored."""
        return self._store.is_authenticated()

    def require_authenticated(self) -> None:
        """Raise unless a token is stored.

        Raises:
            NotAuthenticatedError: If the store holds no token.
        """
        if not self._store.is_authenticated():
            raise NotAuthenticatedError

    # ─────────────────────────────────────────────────────────────────────────
    # Device login
    # ─────────────────────────────────────────────────────────────────────────

    def begin_login(self, **poller_options: Any) -> DeviceAuthRequest:
        """Open a device-auth request.

        Args:
            **poller_options: Forwarded to the poller factory (``on_pending``, timings).

        Raises:
            NetworkError: If the service cannot be reached.
        """
        self._poller = self._poller_factory(self._gateway, **poller_options)
        return self._poller.start()

    def complete_login(
        self,
        request: DeviceAuthRequest,
        *,
        prompt: Callable[[], str | None] | None = None,
        on_fallback: Callable[[DeviceAuthError], None] | None = None,
    ) -> Profile:
        """Wait for approval, store the token and enrich it with the profile.

        The token is written first with a placeholder identity because the
        profile call needs a stored bearer token.

        Raises:
            AuthTimeoutError: Polling timed out and no manual token was accepted.
            AuthRequestExpiredError: Request expired and no manual token was accepted.
            AuthExpiredError: The server rejected the new token.
            PersistenceError: If the store cannot be written.
        """
        if self._poller is None:
            raise RuntimeError("begin_login() must be called first")
        token = self._poller.run(request, prompt=prompt, on_fallback=on_fallback)

        self._store.set_token(token, PENDING_IDENTITY)
        try:
            profile = self._gateway.fetch_profile()
        except AuthExpiredError:
            self._store.clear_auth()
            raise
        self._store.set_token(token, profile.identity)
        self._store.set_profile(profile.tier, profile.preferences)
        logger.info("Logged in as %s (%s)", profile.identity, profile.tier.value)
        return profile

    def login(
        self,
        *,
        prompt: Callable[[], str | None] | None = None,
        on_request: Callable[[DeviceAuthRequest], None] | None = None,
        on_fallback: Callable[[DeviceAuthError], None] | None = None,
        **poller_options: Any,
    ) -> Profile:
        """Run the whole device login.

        Args:
            prompt: Reads a pasted token when polling fails.
            on_request: Called with the request (show the URL, open a browser).
            on_fallback: Called before ``prompt`` with the polling failure.
            **poller_options: Forwarded to the poller factory.

        Returns:
            The profile of the logged-in account.
        """
        request = self.begin_login(**poller_options)
        if on_request is not None:
            on_request(request)
        return self.complete_login(request, prompt=prompt, on_fallback=on_fallback)

    # ─────────────────────────────────────────────────────────────────────────
    # Password login, logout, whoami
    # ─────────────────────────────────────────────────────────────────────────

    def login_with_password(self, identity: str, secret: str) -> LoginResponse:
        """Log in with email and password in one round trip.

        Raises:
            InvalidCredentialsError: If the server rejects the credentials.
        """
        response = self._gateway.login(identity, secret)
        self._store.set_token(response.token, response.identity)
        if response.tier is not None:
            self._store.update(tier=response.tier)
        logger.info("Logged in as %s", response.identity)
        return response

    def logout(self) -> LogoutResult | None:
        """Revoke the token (best effort) and clear the local session.

        Returns:
            None when nobody was logged in, otherwise the logout outcome.
        """
        if not self._store.is_authenticated():
            logger.warning("Not logged in")
            return None

        identity = self._store.read().identity
        revoked = True
        try:
            self._gateway.revoke_token()
        except GitGuardError as exc:
            revoked = False
            logger.warning("Could not revoke token on server (continuing with local logout): %s", exc)

        self._store.clear_auth()
        return LogoutResult(identity=identity, revoked=revoked)

    def whoami(self) -> Profile | None:
        """Fetch the profile of the stored session and refresh tier and preferences.

        Returns:
            None when nobody is logged in, otherwise the profile.

        Raises:
            AuthExpiredError: The token was rejected; the local session is cleared.
        """
        if not self._store.is_authenticated():
            return None
        try:
            profile = self._gateway.fetch_profile()
        except AuthExpiredError:
            self._store.clear_auth()
            raise
        self._store.set_profile(profile.tier, profile.preferences)
        return profile


__all__ = ["SessionManager", "apply_endpoint_override"]
