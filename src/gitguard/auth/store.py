"""Persistent local session for the gitguard CLI.

The store keeps exactly one ``SessionRecord`` per machine in a JSON file
inside an owner-only directory (``~/.gitguard/config.json`` by default).

Reads never fail: a missing file yields the default record and a malformed
one yields the default record plus a warning. Writes replace the whole file
atomically and raise ``PersistenceError`` when the disk refuses them.

Example:
    >>> from gitguard.auth.store import CredentialStore  # doctest: +SKIP
    >>> store = CredentialStore()  # doctest: +SKIP
    >>> store.set_token("gg_abc", "a@b.com")  # doctest: +SKIP
    >>> store.is_authenticated()  # doctest: +SKIP
    True
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from gitguard.auth.models import Preferences, SessionRecord, Tier
from gitguard.config import DIR_MODE, FILE_MODE, resolve_api_url, resolve_config_path
from gitguard.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class CredentialStore:
    """Single-record, file-backed session store.

    Args:
        path: Backing JSON file (default: resolved from ``GITGUARD_CONFIG_DIR``
            or ``~/.gitguard/config.json``).
        default_endpoint: Endpoint of the default record (default: resolved
            from ``GITGUARD_API_URL`` or the production URL).

    Raises:
        PersistenceError: If the backing directory cannot be created.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        *,
        default_endpoint: str | None = None,
    ) -> None:
        self._path = Path(path) if path is not None else resolve_config_path()
        self._default_endpoint = default_endpoint or resolve_api_url()
        self._record: SessionRecord | None = None
        self._ensure_directory()

    @property
    def path(self) -> Path:
        """Return the backing file path."""
        return self._path

    @property
    def default_endpoint(self) -> str:
        """Return the endpoint used when no record is stored."""
        return self._default_endpoint

    # ─────────────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────────────

    def read(self) -> SessionRecord:
        """Return the current session record.

        The file is loaded once and cached; later reads return the cached
        record, which every ``update`` keeps in sync.
        """
        if self._record is None:
            self._record = self._load()
        return self._record

    def update(self, **changes: Any) -> SessionRecord:
        """Merge ``changes`` into the record and persist it.

        A field passed as None is cleared; omitted fields are kept.

        Args:
            **changes: SessionRecord fields to set or clear.

        Returns:
            The merged record.

        Raises:
            TypeError: If a key is not a SessionRecord field.
            ValueError: If the merge would split token and identity.
            PersistenceError: If the file cannot be written.
        """
        merged = self.read().merge(**changes)
        self._write(merged)
        self._record = merged
        return merged

    def set_token(self, token: str, identity: str) -> SessionRecord:
        """Store a token together with the identity it belongs to."""
        return self.update(token=token, identity=identity)

    def set_profile(
        self,
        tier: Tier | str | None,
        preferences: Preferences | dict[str, Any] | None = None,
    ) -> SessionRecord:
        """Store the tier and default scan switches.

        Preferences missing from the source default to False.
        """
        if not isinstance(preferences, Preferences):
            preferences = Preferences.from_dict(preferences)
        return self.update(tier=tier, preferences=preferences)

    def clear_auth(self) -> SessionRecord:
        """Forget everything but the endpoint."""
        return self.update(token=None, identity=None, tier=None, preferences=None)

    def is_authenticated(self) -> bool:
        """Return True when a non-empty token is stored."""
        return self.read().authenticated

    # ─────────────────────────────────────────────────────────────────────────
    # Filesystem
    # ─────────────────────────────────────────────────────────────────────────

    def _default(self) -> SessionRecord:
        return SessionRecord(endpoint=self._default_endpoint)

    def _ensure_directory(self) -> None:
        """Create the backing directory with owner-only permissions."""
        directory = self._path.parent
        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            if os.name == "posix":
                directory.chmod(DIR_MODE)
        except OSError as exc:
            raise PersistenceError(str(directory), str(exc)) from exc

    def _load(self) -> SessionRecord:
        if not self._path.exists():
            logger.debug("No session file at %s, using defaults", self._path)
            return self._default()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            return SessionRecord.from_dict(data, default_endpoint=self._default_endpoint)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Failed to parse config file, using defaults (%s)", exc)
            return self._default()

    def _write(self, record: SessionRecord) -> None:
        """Replace the backing file atomically with ``record``."""
        payload = json.dumps(record.to_dict(), indent=2) + "\n"
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                if os.name == "posix":
                    os.fchmod(handle.fileno(), FILE_MODE)
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(str(self._path), str(exc)) from exc
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
        logger.debug("Session written to %s", self._path)


__all__ = ["CredentialStore"]
