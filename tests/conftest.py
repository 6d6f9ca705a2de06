"""Shared pytest fixtures for the gitguard test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from gitguard.auth.store import CredentialStore
from gitguard.auth.transport import build_client
from gitguard.config import API_URL_ENV, CONFIG_DIR_ENV

# pylint: disable=redefined-outer-name

TEST_ENDPOINT = "https://gitguard.test"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a temp dir and drop any endpoint override."""
    config_dir = tmp_path / "gitguard-home"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
    monkeypatch.delenv(API_URL_ENV, raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Undo the handlers and level installed by the CLI logging setup."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def store(isolated_config: Path) -> CredentialStore:
    """Return a credential store backed by the isolated config directory."""
    return CredentialStore(isolated_config / "config.json", default_endpoint=TEST_ENDPOINT)


@pytest.fixture
def logged_in_store(store: CredentialStore) -> CredentialStore:
    """Return a store holding a token for a pro account."""
    store.set_token("gg_stored", "dev@example.com")
    store.set_profile("pro", {"aiScanEnabled": True})
    return store


@pytest.fixture
def profile_payload() -> dict[str, Any]:
    """Return a ``GET /profile`` answer for a pro account."""
    return {
        "id": "user-1",
        "email": "a@b.com",
        "subscription": "pro",
        "limits": {"dailyScans": 50, "scansRemaining": 42, "resetsAt": "2026-01-01T00:00:00Z"},
        "preferences": {
            "aiScanEnabled": True,
            "dependencyScanEnabled": False,
            "secretScanEnabled": False,
        },
    }


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def mock_client() -> Callable[[CredentialStore, Handler], httpx.Client]:
    """Build an httpx client for a store whose requests go to ``handler``."""

    def _build(store: CredentialStore, handler: Handler) -> httpx.Client:
        return build_client(store, transport=httpx.MockTransport(handler))

    return _build
