"""Shared httpx transport for the gitguard API.

Every call goes to ``{endpoint}/api/v1/cli`` and carries the stored token as
a bearer credential. Request failures become ``NetworkError`` and non-2xx
answers become ``GatewayError`` (``AuthExpiredError`` for 401 on an
authenticated call).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from gitguard import __version__
from gitguard.auth.errors import AuthExpiredError, GatewayError, NetworkError
from gitguard.config import API_PREFIX, REQUEST_TIMEOUT

if TYPE_CHECKING:
    from gitguard.auth.store import CredentialStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreBearerAuth(httpx.Auth):
    """Attach the token currently held by the credential store.

    The token is read on every request so a token stored mid-command (the
    device login writes it before fetching the profile) is picked up.
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._store.read().token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


def build_client(
    store: CredentialStore,
    *,
    transport: httpx.BaseTransport | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> httpx.Client:
    """Create an httpx client bound to the stored endpoint.

    Args:
        store: Credential store providing endpoint and token.
        transport: Optional transport (tests pass ``httpx.MockTransport``).
        timeout: Per-request timeout in seconds.

    Returns:
        Configured ``httpx.Client``; the caller closes it.
    """
    base_url = store.read().endpoint.rstrip("/") + API_PREFIX
    return httpx.Client(
        base_url=base_url,
        auth=StoreBearerAuth(store),
        timeout=httpx.Timeout(timeout),
        headers={"Content-Type": "application/json", "User-Agent": f"gitguard-cli/{__version__}"},
        transport=transport,
    )


def server_message(response: httpx.Response) -> str | None:
    """Return the ``message`` field of a JSON error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


def send(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json_body: Any = None,
    authenticated: bool = True,
) -> httpx.Response:
    """Send one request and translate transport failures.

    Args:
        client: Client from ``build_client``.
        method: HTTP method.
        path: Path below the API prefix.
        json_body: Optional JSON payload.
        authenticated: Whether 401 means the stored token was rejected.

    Returns:
        The successful response.

    Raises:
        NetworkError: If the request fails before a response arrives.
        AuthExpiredError: On 401 for an authenticated call.
        GatewayError: On any other non-2xx status.
    """
    try:
        response = client.request(method, path, json=json_body)
    except httpx.RequestError as exc:
        url = f"{client.base_url}{path.lstrip('/')}"
        logger.debug("%s %s failed: %s", method, url, exc)
        raise NetworkError(f"Cannot reach {url}: {exc}", url=url) from exc

    logger.debug("%s %s -> %d", method, response.request.url, response.status_code)
    if response.is_success:
        return response

    message = server_message(response)
    if authenticated and response.status_code == HTTPStatus.UNAUTHORIZED:
        raise AuthExpiredError(message)
    raise GatewayError(
        message or f"Request failed with status {response.status_code}",
        status_code=response.status_code,
        server_message=message,
    )


def json_object(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body.

    Raises:
        GatewayError: If the body is not a JSON object.
    """
    try:
        body = response.json()
    except ValueError as exc:
        raise GatewayError("Invalid JSON in response", status_code=response.status_code) from exc
    if not isinstance(body, dict):
        raise GatewayError("Unexpected response shape", status_code=response.status_code)
    return body


def parse_model(factory: Callable[[dict[str, Any]], T], response: httpx.Response) -> T:
    """Build a model from a JSON answer, reporting a bad shape as a gateway error.

    Args:
        factory: ``from_dict`` classmethod of the model to build.
        response: Successful response from ``send``.

    Returns:
        The model built by ``factory``.

    Raises:
        GatewayError: If the body is not a JSON object or a field is missing or mistyped.
    """
    try:
        return factory(json_object(response))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise GatewayError(
            f"Unexpected response shape: {exc}",
            status_code=response.status_code,
        ) from exc


__all__ = [
    "StoreBearerAuth",
    "build_client",
    "json_object",
    "parse_model",
    "send",
    "server_message",
]
