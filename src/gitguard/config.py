"""Constants and environment resolution for gitguard.

Environment variables are read when the resolver functions are called, not
at import time, so tests can patch them with ``monkeypatch.setenv``.

Supported variables:

- ``GITGUARD_API_URL``: remote endpoint override.
- ``GITGUARD_CONFIG_DIR``: directory holding ``config.json``.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_API_URL = "https://www.gitguard.net"
API_PREFIX = "/api/v1/cli"

API_URL_ENV = "GITGUARD_API_URL"
CONFIG_DIR_ENV = "GITGUARD_CONFIG_DIR"

CONFIG_DIR_NAME = ".gitguard"
CONFIG_FILE_NAME = "config.json"

# Owner-only permissions (POSIX)
DIR_MODE = 0o700
FILE_MODE = 0o600

# Device-auth polling
POLL_INTERVAL_SECONDS = 2.0
MAX_POLL_SECONDS = 600.0
HEARTBEAT_EVERY = 5
TOKEN_PREFIX = "gg_"
PENDING_IDENTITY = "temp@email.com"

REQUEST_TIMEOUT = 60.0

# Scan glue
DEFAULT_MAX_FILES = 100


def api_url_override() -> str | None:
    """Return the endpoint override from the environment, if any.

    Returns:
        The stripped value of ``GITGUARD_API_URL`` or None when unset/blank.

    Examples:
        >>> import os
        >>> os.environ["GITGUARD_API_URL"] = "http://localhost:3100/"
        >>> api_url_override()
        'http://localhost:3100'
        >>> del os.environ["GITGUARD_API_URL"]
    """
    value = os.environ.get(API_URL_ENV, "").strip()
    return value.rstrip("/") or None


def resolve_api_url() -> str:
    """Return the endpoint used to seed a fresh session record."""
    return api_url_override() or DEFAULT_API_URL


def resolve_config_dir() -> Path:
    """Return the per-user configuration directory."""
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME


def resolve_config_path() -> Path:
    """Return the path of the session record file."""
    return resolve_config_dir() / CONFIG_FILE_NAME


__all__ = [
    "API_PREFIX",
    "API_URL_ENV",
    "CONFIG_DIR_ENV",
    "DEFAULT_API_URL",
    "DEFAULT_MAX_FILES",
    "DIR_MODE",
    "FILE_MODE",
    "HEARTBEAT_EVERY",
    "MAX_POLL_SECONDS",
    "PENDING_IDENTITY",
    "POLL_INTERVAL_SECONDS",
    "REQUEST_TIMEOUT",
    "TOKEN_PREFIX",
    "api_url_override",
    "resolve_api_url",
    "resolve_config_dir",
    "resolve_config_path",
]
