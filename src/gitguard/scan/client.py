"""Submit collected files to the remote scanning service."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING

from gitguard.auth.errors import GatewayError, RateLimitError
from gitguard.auth.transport import build_client, parse_model, send
from gitguard.scan.models import ScanOptions, ScanResult

if TYPE_CHECKING:
    import httpx

    from gitguard.auth.store import CredentialStore

logger = logging.getLogger(__name__)


class ScanClient:
    """Thin client for ``POST /scan``.

    Args:
        store: Credential store providing endpoint and bearer token.
        client: Optional preconfigured httpx client.
    """

    def __init__(self, store: CredentialStore, *, client: httpx.Client | None = None) -> None:
        self._client = client if client is not None else build_client(store)

    def __enter__(self) -> ScanClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def scan(
        self,
        files: dict[str, str],
        options: ScanOptions,
    ) -> ScanResult:
        """Submit files and return the findings.

        Raises:
            AuthExpiredError: The stored token was rejected.
            RateLimitError: The daily quota is exhausted.
            GatewayError: Any other non-2xx answer or a malformed result.
            NetworkError: The service cannot be reached.
        """
        body: dict[str, object] = {"files": files, "options": options.to_dict()}
        logger.debug("Submitting %d file(s) with options %s", len(files), options.to_dict())
        try:
            response = send(self._client, "POST", "/scan", json_body=body)
        except GatewayError as exc:
            if exc.status_code == HTTPStatus.TOO_MANY_REQUESTS:
                raise RateLimitError(exc.server_message) from exc
            raise
        return parse_model(ScanResult.from_dict, response)


__all__ = ["ScanClient"]
