"""Remote authentication endpoints of the GitGuard service.

``AuthGateway`` is the contract the session layer depends on; the device
poller and session manager only ever talk to it. ``HttpAuthGateway`` is the
httpx implementation used by the CLI.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gitguard.auth.errors import GatewayError, InvalidCredentialsError
from gitguard.auth.models import (
    DeviceAuthRequest,
    LoginResponse,
    PollResult,
    PollStatus,
    Profile,
)
from gitguard.auth.transport import build_client, parse_model, send

if TYPE_CHECKING:
    import httpx

    from gitguard.auth.store import CredentialStore

logger = logging.getLogger(__name__)

_CREDENTIAL_REJECTIONS = frozenset(
    {HTTPStatus.BAD_REQUEST, HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN},
)


@runtime_checkable
class AuthGateway(Protocol):
    """Operations the session layer needs from the remote service."""

    def begin_device_auth(self) -> DeviceAuthRequest:
        """Open a device-auth request."""
        ...

    def poll_device_auth(self, request_code: str) -> PollResult:
        """Poll one device-auth request; a 410 answer is reported as expired."""
        ...

    def revoke_token(self) -> None:
        """Revoke the stored token server-side."""
        ...

    def fetch_profile(self) -> Profile:
        """Fetch the profile bound to the stored token."""
        ...

    def login(self, identity: str, secret: str) -> LoginResponse:
        """Exchange email and password for a token."""
        ...


class HttpAuthGateway:
    """httpx implementation of ``AuthGateway``.

    Args:
        store: Credential store providing endpoint and bearer token.
        client: Optional preconfigured client (default: ``build_client(store)``).

    Example:
        >>> with HttpAuthGateway(store) as gateway:  # doctest: +SKIP
        ...     request = gateway.begin_device_auth()
    """

    def __init__(self, store: CredentialStore, *, client: httpx.Client | None = None) -> None:
        self._client = client if client is not None else build_client(store)

    def __enter__(self) -> HttpAuthGateway:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def client(self) -> httpx.Client:
        """Return the underlying httpx client."""
        return self._client

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def begin_device_auth(self) -> DeviceAuthRequest:
        response = send(self._client, "POST", "/auth/request", authenticated=False)
        request = parse_model(DeviceAuthRequest.from_dict, response)
        logger.debug("Device-auth request %s opened", request.request_code)
        return request

    def poll_device_auth(self, request_code: str) -> PollResult:
        try:
            response = send(self._client, "GET", f"/auth/poll/{request_code}", authenticated=False)
        except GatewayError as exc:
            if exc.gone:
                return PollResult(status=PollStatus.EXPIRED)
            raise
        return parse_model(PollResult.from_dict, response)

    def revoke_token(self) -> None:
        send(self._client, "POST", "/auth/revoke")

    def fetch_profile(self) -> Profile:
        response = send(self._client, "GET", "/profile")
        return parse_model(Profile.from_dict, response)

    def login(self, identity: str, secret: str) -> LoginResponse:
        try:
            response = send(
                self._client,
                "POST",
                "/auth/login",
                json_body={"email": identity, "password": secret},
                authenticated=False,
            )
        except GatewayError as exc:
            if exc.status_code in _CREDENTIAL_REJECTIONS:
                raise InvalidCredentialsError(exc.status_code, exc.server_message) from exc
            raise
        return parse_model(LoginResponse.from_dict, response)


__all__ = ["AuthGateway", "HttpAuthGateway"]
