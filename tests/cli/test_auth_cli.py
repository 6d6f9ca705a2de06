"""Tests for auth CLI commands."""

from __future__ import annotations

import importlib
import json
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from gitguard.auth.errors import AuthExpiredError, InvalidCredentialsError, NetworkError
from gitguard.auth.models import (
    DeviceAuthRequest,
    LoginResponse,
    PollResult,
    PollStatus,
    Preferences,
    Profile,
    ScanLimits,
    Tier,
)
from gitguard.auth.store import CredentialStore
from gitguard.cli.app import app

# Mark all tests in this module as CLI tests
# Run with: pytest -m cli
pytestmark = pytest.mark.cli

runner = CliRunner()

# Import modules for monkeypatching
common_mod = importlib.import_module("gitguard.cli.common")
login_mod = importlib.import_module("gitguard.cli.commands.auth.login")

AUTH_URL = "https://gitguard.test/cli-auth?code=req-1"


@pytest.fixture
def gateway(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the HTTP gateway used by every command with a mock."""
    mock = MagicMock()
    mock.__enter__.return_value = mock
    mock.begin_device_auth.return_value = DeviceAuthRequest(request_code="req-1", verification_url=AUTH_URL)
    mock.poll_device_auth.return_value = PollResult(status=PollStatus.COMPLETED, token="gg_xyz")
    mock.fetch_profile.return_value = Profile(
        identity="a@b.com",
        tier=Tier.PRO,
        limits=ScanLimits(daily_scans=50, scans_remaining=42),
        preferences=Preferences(ai_scan=True),
    )
    monkeypatch.setattr(common_mod, "HttpAuthGateway", lambda _store: mock)
    return mock


@pytest.fixture
def browser(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the webbrowser module used by login."""
    mock = MagicMock()
    mock.open.return_value = True
    monkeypatch.setattr(login_mod, "webbrowser", mock)
    return mock


@pytest.fixture
def signed_in() -> CredentialStore:
    """Store a session for dev@example.com."""
    store = CredentialStore()
    store.set_token("gg_stored", "dev@example.com")
    store.set_profile("pro", {"aiScanEnabled": True})
    return store


def _reload() -> CredentialStore:
    return CredentialStore()


# ─────────────────────────────────────────────────────────────────────────────
# login
# ─────────────────────────────────────────────────────────────────────────────


class TestLoginDevice:
    """Tests for the browser login flow."""

    def test_success(self, gateway: MagicMock, browser: MagicMock) -> None:
        """A completed poll stores the token and shows the account."""
        result = runner.invoke(app, ["login"])

        assert result.exit_code == 0, result.stdout
        assert "Successfully logged in as a@b.com" in result.stdout
        assert "Subscription: pro" in result.stdout
        assert "Daily scans remaining: 42/50" in result.stdout
        assert "AI-powered analysis enabled" in result.stdout
        browser.open.assert_called_once_with(AUTH_URL)
        record = _reload().read()
        assert (record.token, record.identity, record.tier) == ("gg_xyz", "a@b.com", Tier.PRO)

    def test_no_browser(self, gateway: MagicMock, browser: MagicMock) -> None:
        """--no-browser only prints the URL."""
        result = runner.invoke(app, ["login", "--no-browser"])

        assert result.exit_code == 0
        assert f"Visit: {AUTH_URL}" in result.stdout
        browser.open.assert_not_called()

    def test_expired_then_manual_token(self, gateway: MagicMock, browser: MagicMock) -> None:
        """A pasted token completes the login after expiry."""
        gateway.poll_device_auth.return_value = PollResult(status=PollStatus.EXPIRED)

        result = runner.invoke(app, ["login"], input="gg_manual\n")

        assert result.exit_code == 0, result.stdout
        assert "Automatic authentication failed" in result.stdout
        assert _reload().read().token == "gg_manual"

    def test_expired_with_bad_token(self, gateway: MagicMock, browser: MagicMock) -> None:
        """A malformed pasted token fails the login."""
        gateway.poll_device_auth.return_value = PollResult(status=PollStatus.EXPIRED)

        result = runner.invoke(app, ["login"], input="not-a-token\n")

        assert result.exit_code == 1
        assert "Authentication request expired. Please try again." in result.stdout
        assert _reload().is_authenticated() is False

    def test_network_error(self, gateway: MagicMock, browser: MagicMock) -> None:
        """An unreachable service fails with the generic message."""
        gateway.begin_device_auth.side_effect = NetworkError("Cannot reach https://gitguard.test")

        result = runner.invoke(app, ["login"])

        assert result.exit_code == 1
        assert "Login failed. Please try again." in result.stdout
        assert "Cannot reach" in result.stdout

    def test_endpoint_override(
        self, gateway: MagicMock, browser: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """GITGUARD_API_URL is announced and persisted."""
        monkeypatch.setenv("GITGUARD_API_URL", "http://localhost:3100")

        result = runner.invoke(app, ["login"])

        assert result.exit_code == 0
        assert "Using API URL: http://localhost:3100" in result.stdout
        assert _reload().read().endpoint == "http://localhost:3100"


class TestLoginPassword:
    """Tests for email/password login."""

    def test_success(self, gateway: MagicMock) -> None:
        """Credentials on the command line log in directly."""
        gateway.login.return_value = LoginResponse(token="gg_pw", identity="a@b.com", tier=Tier.PREMIER)

        result = runner.invoke(app, ["login", "-e", "a@b.com", "-p", "hunter2"])

        assert result.exit_code == 0
        assert "Successfully logged in as a@b.com" in result.stdout
        gateway.login.assert_called_once_with("a@b.com", "hunter2")
        gateway.begin_device_auth.assert_not_called()
        assert _reload().read().tier is Tier.PREMIER

    def test_prompts_for_password(self, gateway: MagicMock) -> None:
        """A missing password is prompted."""
        gateway.login.return_value = LoginResponse(token="gg_pw", identity="a@b.com")

        result = runner.invoke(app, ["login", "--email", "a@b.com"], input="hunter2\n")

        assert result.exit_code == 0
        gateway.login.assert_called_once_with("a@b.com", "hunter2")

    def test_invalid_credentials(self, gateway: MagicMock) -> None:
        """A rejection exits non-zero with the server message."""
        gateway.login.side_effect = InvalidCredentialsError(401, "Invalid credentials")

        result = runner.invoke(app, ["login", "-e", "a@b.com", "-p", "wrong"])

        assert result.exit_code == 1
        assert "Invalid credentials" in result.stdout
        assert _reload().is_authenticated() is False


# ─────────────────────────────────────────────────────────────────────────────
# logout
# ─────────────────────────────────────────────────────────────────────────────


class TestLogout:
    """Tests for the logout command."""

    def test_logout(self, gateway: MagicMock, signed_in: CredentialStore) -> None:
        """Revokes the token and clears the session."""
        result = runner.invoke(app, ["logout"])

        assert result.exit_code == 0
        assert "Token revoked on server" in result.stdout
        assert "Logged out dev@example.com" in result.stdout
        gateway.revoke_token.assert_called_once_with()
        assert _reload().is_authenticated() is False

    def test_revoke_failure_still_logs_out(self, gateway: MagicMock, signed_in: CredentialStore) -> None:
        """A failed revoke is a warning."""
        gateway.revoke_token.side_effect = NetworkError("down")

        result = runner.invoke(app, ["logout"])

        assert result.exit_code == 0
        assert "Could not revoke token on server" in result.stdout
        assert _reload().is_authenticated() is False

    def test_not_logged_in(self, gateway: MagicMock) -> None:
        """Logging out without a session is not an error."""
        result = runner.invoke(app, ["logout"])

        assert result.exit_code == 0
        assert "Not logged in" in result.stdout
        gateway.revoke_token.assert_not_called()


# ─────────────────────────────────────────────────────────────────────────────
# whoami
# ─────────────────────────────────────────────────────────────────────────────


class TestWhoami:
    """Tests for the whoami command."""

    def test_not_logged_in(self, gateway: MagicMock) -> None:
        """Reports the missing session with a login hint and exits cleanly."""
        result = runner.invoke(app, ["whoami"])

        assert result.exit_code == 0
        assert "Not logged in" in result.stdout
        assert "gitguard login" in result.stdout
        gateway.fetch_profile.assert_not_called()

    def test_mistyped_config_reads_as_logged_out(self, gateway: MagicMock) -> None:
        """A config file with a non-string URL is ignored instead of crashing."""
        path = CredentialStore().path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"apiUrl": 5, "apiToken": "gg_a", "email": "a@b.com"}), encoding="utf-8")

        result = runner.invoke(app, ["whoami"])

        assert result.exit_code == 0
        assert "Not logged in" in result.stdout
        gateway.fetch_profile.assert_not_called()

    def test_shows_profile(self, gateway: MagicMock, signed_in: CredentialStore) -> None:
        """The profile table is printed."""
        result = runner.invoke(app, ["whoami"])

        assert result.exit_code == 0
        assert "a@b.com" in result.stdout
        assert "AI analysis" in result.stdout
        assert "Dependency scanning" not in result.stdout

    def test_json(self, gateway: MagicMock, signed_in: CredentialStore) -> None:
        """--json prints the profile document only."""
        result = runner.invoke(app, ["whoami", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["email"] == "a@b.com"
        assert data["subscription"] == "pro"
        assert data["limits"]["scansRemaining"] == 42

    def test_expired_token(self, gateway: MagicMock, signed_in: CredentialStore) -> None:
        """A rejected token clears the session and asks for a new login."""
        gateway.fetch_profile.side_effect = AuthExpiredError()

        result = runner.invoke(app, ["whoami"])

        assert result.exit_code == 1
        assert "Authentication expired. Please login again." in result.stdout
        assert _reload().is_authenticated() is False
