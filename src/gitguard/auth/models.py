"""Data models for the gitguard.auth module.

This module defines the core data structures used by the auth module:

- Tier: Enum for the subscription level (free, pro, premier)
- Preferences: Default scan feature switches
- SessionRecord: Frozen local session persisted by the credential store
- DeviceAuthRequest: Server-issued device-auth handshake
- PollStatus / PollResult: One device-auth poll answer
- ScanLimits / Profile: Account profile returned by the server
- LoginResponse: Answer of the email/password login
- PollerState: States of the device-auth state machine
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Wire names of the Preferences fields
_PREFERENCE_KEYS = {
    "ai_scan": "aiScanEnabled",
    "dependency_scan": "dependencyScanEnabled",
    "secret_scan": "secretScanEnabled",
}

# Wire names of the SessionRecord fields
_RECORD_KEYS = {
    "endpoint": "apiUrl",
    "token": "apiToken",
    "identity": "email",
    "tier": "subscription",
    "preferences": "preferences",
}


def _typed(data: dict[str, Any], key: str, kind: type) -> Any:
    """Return ``data[key]`` when absent, null or of type ``kind``.

    Raises:
        TypeError: If the value has another type.
    """
    value = data.get(key)
    if value is not None and type(value) is not kind:
        raise TypeError(f"{key} must be {kind.__name__}, got {type(value).__name__}")
    return value


class Tier(str, Enum):
    """Subscription level gating default scan features.

    Attributes:
        FREE: Base tier, no premium scan features.
        PRO: AI-powered analysis available.
        PREMIER: AI, dependency and secret scanning available.
    """

    FREE = "free"
    PRO = "pro"
    PREMIER = "premier"

    @classmethod
    def parse(cls, value: Any) -> Tier | None:
        """Return the matching tier, or None for a missing/unknown value.

        Examples:
            >>> Tier.parse("pro")
            <Tier.PRO: 'pro'>
            >>> Tier.parse("gold") is None
            True
        """
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Unknown subscription tier %r ignored", value)
            return None


@dataclass(frozen=True, slots=True)
class Preferences:
    """Default scan feature switches of an account.

    Attributes:
        ai_scan: AI-powered analysis enabled by default.
        dependency_scan: Dependency scanning enabled by default.
        secret_scan: Secret detection enabled by default.

    Examples:
        >>> Preferences.from_dict({"aiScanEnabled": True})
        Preferences(ai_scan=True, dependency_scan=False, secret_scan=False)
    """

    ai_scan: bool = False
    dependency_scan: bool = False
    secret_scan: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Preferences:
        """Build preferences from a wire mapping, defaulting missing keys to False.

        Raises:
            TypeError: If the mapping or a switch has the wrong JSON type.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise TypeError(f"preferences must be an object, got {type(data).__name__}")
        return cls(**{attr: bool(_typed(data, key, bool)) for attr, key in _PREFERENCE_KEYS.items()})

    def to_dict(self) -> dict[str, bool]:
        """Serialize to the wire mapping."""
        return {key: getattr(self, attr) for attr, key in _PREFERENCE_KEYS.items()}


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """The single local session persisted per machine.

    Attributes:
        endpoint: Base URL of the remote service.
        token: Opaque bearer credential, None when logged out.
        identity: Email bound to the token.
        tier: Subscription tier, None until a login or profile supplies it.
        preferences: Default scan switches, None until a profile supplies them.
    """

    endpoint: str
    token: str | None = None
    identity: str | None = None
    tier: Tier | None = None
    preferences: Preferences | None = None

    @property
    def authenticated(self) -> bool:
        """Return True when a non-empty token is stored."""
        return bool(self.token)

    @property
    def effective_preferences(self) -> Preferences:
        """Return stored preferences, all False when none are stored."""
        return self.preferences or Preferences()

    def merge(self, **changes: Any) -> SessionRecord:
        """Return a copy with ``changes`` applied (None clears a field).

        Raises:
            TypeError: If a key is not a SessionRecord field.
            ValueError: If the result holds a token without identity or the reverse.
        """
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise TypeError(f"Unknown session field(s): {', '.join(sorted(unknown))}")
        if "tier" in changes:
            changes["tier"] = Tier.parse(changes["tier"])
        merged = replace(self, **changes)
        if bool(merged.token) != bool(merged.identity):
            raise ValueError("token and identity must be set or cleared together")
        return merged

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, default_endpoint: str) -> SessionRecord:
        """Build a record from the persisted JSON mapping.

        A token without identity (or the reverse) is dropped with a warning.

        Raises:
            TypeError: If a field has the wrong JSON type.
        """
        endpoint = _typed(data, _RECORD_KEYS["endpoint"], str)
        token = _typed(data, _RECORD_KEYS["token"], str) or None
        identity = _typed(data, _RECORD_KEYS["identity"], str) or None
        tier = _typed(data, _RECORD_KEYS["tier"], str)
        raw_preferences = _typed(data, _RECORD_KEYS["preferences"], dict)
        if bool(token) != bool(identity):
            logger.warning("Stored session has a token without identity (or the reverse), ignoring it")
            token = identity = None

        return cls(
            endpoint=endpoint or default_endpoint,
            token=token,
            identity=identity,
            tier=Tier.parse(tier),
            preferences=Preferences.from_dict(raw_preferences) if raw_preferences is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON mapping, omitting absent fields."""
        values: dict[str, Any] = {
            "endpoint": self.endpoint,
            "token": self.token,
            "identity": self.identity,
            "tier": self.tier.value if self.tier else None,
            "preferences": self.preferences.to_dict() if self.preferences else None,
        }
        return {_RECORD_KEYS[name]: value for name, value in values.items() if value is not None}


@dataclass(frozen=True, slots=True)
class DeviceAuthRequest:
    """One in-flight device-auth handshake.

    Attributes:
        request_code: Server-issued correlation identifier.
        verification_url: Page the user opens in a browser.
        expires_in: Server-side lifetime in seconds, when announced.
    """

    request_code: str
    verification_url: str
    expires_in: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceAuthRequest:
        """Build from the ``POST /auth/request`` answer."""
        expires_in = data.get("expiresIn")
        return cls(
            request_code=str(data["requestCode"]),
            verification_url=str(data["authUrl"]),
            expires_in=int(expires_in) if expires_in is not None else None,
        )


class PollStatus(str, Enum):
    """Status reported by one device-auth poll."""

    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class PollResult:
    """Answer of ``GET /auth/poll/{requestCode}``."""

    status: PollStatus
    token: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PollResult:
        """Build from the poll answer; unknown statuses count as pending."""
        try:
            status = PollStatus(str(data.get("status", "")).lower())
        except ValueError:
            logger.debug("Unknown poll status %r treated as pending", data.get("status"))
            status = PollStatus.PENDING
        return cls(status=status, token=data.get("token") or None)


@dataclass(frozen=True, slots=True)
class ScanLimits:
    """Daily scan quota of an account."""

    daily_scans: int = 0
    scans_remaining: int = 0
    resets_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ScanLimits:
        """Build from the ``limits`` object of a profile."""
        data = data or {}
        return cls(
            daily_scans=int(data.get("dailyScans", 0)),
            scans_remaining=int(data.get("scansRemaining", 0)),
            resets_at=data.get("resetsAt"),
        )


@dataclass(frozen=True, slots=True)
class Profile:
    """Account profile returned by ``GET /profile``.

    Attributes:
        identity: Account email.
        tier: Subscription tier (free when the server omits it).
        limits: Daily scan quota.
        preferences: Default scan switches.
        id: Server-side account identifier.
    """

    identity: str
    tier: Tier = Tier.FREE
    limits: ScanLimits = field(default_factory=ScanLimits)
    preferences: Preferences = field(default_factory=Preferences)
    id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        """Build from the profile document."""
        return cls(
            identity=str(data["email"]),
            tier=Tier.parse(data.get("subscription")) or Tier.FREE,
            limits=ScanLimits.from_dict(data.get("limits")),
            preferences=Preferences.from_dict(data.get("preferences")),
            id=data.get("id"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for ``--json`` output."""
        return {
            "id": self.id,
            "email": self.identity,
            "subscription": self.tier.value,
            "limits": {
                "dailyScans": self.limits.daily_scans,
                "scansRemaining": self.limits.scans_remaining,
                "resetsAt": self.limits.resets_at,
            },
            "preferences": self.preferences.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class LoginResponse:
    """Answer of the email/password login."""

    token: str
    identity: str
    tier: Tier | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoginResponse:
        """Build from ``{token, user: {email, subscription}}``."""
        user = data.get("user") or {}
        return cls(
            token=str(data["token"]),
            identity=str(user["email"]),
            tier=Tier.parse(user.get("subscription")),
        )


@dataclass(frozen=True, slots=True)
class LogoutResult:
    """Outcome of a logout.

    Attributes:
        identity: Email that was logged out.
        revoked: Whether the server confirmed the revocation.
    """

    identity: str | None
    revoked: bool


class PollerState(str, Enum):
    """States of the device-auth state machine.

    Attributes:
        STARTED: Request issued, nothing polled yet.
        POLLING: Waiting for the user to approve in the browser.
        COMPLETED: A token was obtained.
        EXPIRED: The server invalidated the request.
        TIMED_OUT: The client-side ceiling was reached.
        MANUAL_ENTRY: Waiting for a pasted token.
        ABORTED: The pasted token was rejected.
    """

    STARTED = "started"
    POLLING = "polling"
    COMPLETED = "completed"
    EXPIRED = "expired"
    TIMED_OUT = "timed_out"
    MANUAL_ENTRY = "manual_entry"
    ABORTED = "aborted"


__all__ = [
    "DeviceAuthRequest",
    "LoginResponse",
    "LogoutResult",
    "PollResult",
    "PollStatus",
    "PollerState",
    "Preferences",
    "Profile",
    "ScanLimits",
    "SessionRecord",
    "Tier",
]
