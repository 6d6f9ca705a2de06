"""Device-auth polling state machine.

The CLI has no inbound address, so after opening a device-auth request it
polls the service until the user approves the request in a browser::

    STARTED -> POLLING -> COMPLETED
                       -> EXPIRED   -> MANUAL_ENTRY -> COMPLETED | ABORTED
                       -> TIMED_OUT -> MANUAL_ENTRY -> COMPLETED | ABORTED

Timeout is cumulative wall-clock time since the request was opened, checked
before every poll with ``has_timed_out``. The poller never persists the
token; the session manager does.

Example:
    >>> poller = DeviceAuthPoller(gateway)  # doctest: +SKIP
    >>> request = poller.start()  # doctest: +SKIP
    >>> token = poller.run(request, prompt=lambda: input("Token: "))  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from gitguard.auth.errors import (
    AuthRequestExpiredError,
    AuthTimeoutError,
    DeviceAuthError,
    GatewayError,
    ManualTokenRejectedError,
)
from gitguard.auth.models import PollerState, PollStatus
from gitguard.config import HEARTBEAT_EVERY, MAX_POLL_SECONDS, POLL_INTERVAL_SECONDS, TOKEN_PREFIX

if TYPE_CHECKING:
    from gitguard.auth.gateway import AuthGateway
    from gitguard.auth.models import DeviceAuthRequest

logger = logging.getLogger(__name__)


def has_timed_out(started_at: float, now: float, ceiling: float) -> bool:
    """Return True once ``ceiling`` seconds have elapsed since ``started_at``.

    Examples:
        >>> has_timed_out(100.0, 699.9, 600.0)
        False
        >>> has_timed_out(100.0, 700.0, 600.0)
        True
    """
    return now - started_at >= ceiling


def is_token_shaped(value: str | None) -> bool:
    """Return True when ``value`` looks like a GitGuard token.

    Only the prefix is checked; the server validates the token on first use.

    Examples:
        >>> is_token_shaped("gg_abc")
        True
        >>> is_token_shaped("abc")
        False
    """
    return bool(value) and value.startswith(TOKEN_PREFIX)


def mask_token(token: str) -> str:
    """Return a short preview safe for debug logs."""
    return token[: len(TOKEN_PREFIX) + 3] + "..."


def _log_heartbeat(attempts: int) -> None:
    logger.info("Still waiting for authentication... (%d polls)", attempts)


class DeviceAuthPoller:
    """Drive one device-auth handshake to a terminal state.

    Args:
        gateway: Remote auth endpoints.
        interval: Seconds between two polls.
        max_wait: Client-side ceiling in seconds.
        heartbeat_every: Call ``on_pending`` after every N-th consecutive pending poll.
        on_pending: Heartbeat callback receiving the number of pending polls.
        clock: Monotonic clock (injectable for tests).
        sleep: Sleep function (injectable for tests).
    """

    def __init__(
        self,
        gateway: AuthGateway,
        *,
        interval: float = POLL_INTERVAL_SECONDS,
        max_wait: float = MAX_POLL_SECONDS,
        heartbeat_every: int = HEARTBEAT_EVERY,
        on_pending: Callable[[int], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval < 0 or max_wait <= 0 or heartbeat_every < 1:
            raise ValueError("interval must be >= 0, max_wait > 0 and heartbeat_every >= 1")
        self._gateway = gateway
        self._interval = interval
        self._max_wait = max_wait
        self._heartbeat_every = heartbeat_every
        self._on_pending = on_pending or _log_heartbeat
        self._clock = clock
        self._sleep = sleep
        self._state: PollerState | None = None
        self._started_at: float | None = None
        self._polls = 0

    @property
    def state(self) -> PollerState | None:
        """Return the current state (None before ``start``)."""
        return self._state

    @property
    def polls(self) -> int:
        """Return the number of poll calls issued so far."""
        return self._polls

    def _transition(self, state: PollerState) -> None:
        logger.debug("Device auth: %s -> %s", self._state.value if self._state else "-", state.value)
        self._state = state

    def start(self) -> DeviceAuthRequest:
        """Open a device-auth request.

        Returns:
            The server-issued request.

        Raises:
            NetworkError: If the service cannot be reached.
        """
        request = self._gateway.begin_device_auth()
        self._started_at = self._clock()
        self._polls = 0
        self._transition(PollerState.STARTED)
        return request

    def wait_for_token(self, request: DeviceAuthRequest) -> str:
        """Poll until the request completes, expires or times out.

        Args:
            request: Request returned by ``start``.

        Returns:
            The token issued by the server.

        Raises:
            AuthRequestExpiredError: If the server expired the request.
            AuthTimeoutError: If the client-side ceiling was reached.
            NetworkError: If a poll cannot reach the service.
        """
        if self._started_at is None:
            self._started_at = self._clock()
        self._transition(PollerState.POLLING)
        pending = 0

        while not has_timed_out(self._started_at, self._clock(), self._max_wait):
            self._polls += 1
            try:
                result = self._gateway.poll_device_auth(request.request_code)
            except GatewayError as exc:
                if not exc.gone:
                    raise
                result = None

            if result is None or result.status is PollStatus.EXPIRED:
                self._transition(PollerState.EXPIRED)
                raise AuthRequestExpiredError(request.request_code)

            if result.status is PollStatus.COMPLETED and result.token:
                self._transition(PollerState.COMPLETED)
                logger.debug("Device auth completed with token %s", mask_token(result.token))
                return result.token

            pending += 1
            if pending % self._heartbeat_every == 0:
                self._on_pending(pending)
            self._sleep(self._interval)

        self._transition(PollerState.TIMED_OUT)
        raise AuthTimeoutError(self._max_wait)

    def accept_manual_token(self, value: str | None, failure: DeviceAuthError) -> str:
        """Accept a pasted token after the automatic path failed.

        Args:
            value: Text entered by the user.
            failure: The timeout or expiry error that triggered manual entry.

        Returns:
            The stripped token.

        Raises:
            ManualTokenRejectedError: If the text does not look like a token.
        """
        self._transition(PollerState.MANUAL_ENTRY)
        token = (value or "").strip()
        if is_token_shaped(token):
            self._transition(PollerState.COMPLETED)
            return token
        self._transition(PollerState.ABORTED)
        raise ManualTokenRejectedError(failure)

    def run(
        self,
        request: DeviceAuthRequest,
        *,
        prompt: Callable[[], str | None] | None = None,
        on_fallback: Callable[[DeviceAuthError], None] | None = None,
    ) -> str:
        """Poll for a token and fall back to manual entry.

        Args:
            request: Request returned by ``start``.
            prompt: Reads a pasted token; without it there is no fallback.
            on_fallback: Called with the failure before ``prompt``.

        Returns:
            The token, polled or pasted.

        Raises:
            AuthTimeoutError: Timed out and no usable token was pasted.
            AuthRequestExpiredError: Expired and no usable token was pasted.
        """
        try:
            return self.wait_for_token(request)
        except DeviceAuthError as failure:
            if prompt is None:
                raise
            logger.info("Automatic authentication failed (%s), offering manual entry", failure.reason)
            if on_fallback is not None:
                on_fallback(failure)
            try:
                return self.accept_manual_token(prompt(), failure)
            except ManualTokenRejectedError as rejected:
                raise failure from rejected


__all__ = [
    "DeviceAuthPoller",
    "has_timed_out",
    "is_token_shaped",
    "mask_token",
]
