"""Authenticate with GitGuard (browser device flow or email/password)."""

from __future__ import annotations

import webbrowser
from typing import TYPE_CHECKING

import typer

from gitguard.auth.errors import (
    AuthRequestExpiredError,
    AuthTimeoutError,
    InvalidCredentialsError,
)
from gitguard.auth.models import Tier
from gitguard.auth.session import apply_endpoint_override
from gitguard.cli.common import (
    console,
    exit_error,
    get_store,
    handle_error,
    info,
    open_session,
    success,
    warning,
)
from gitguard.exceptions import GitGuardError

from .common import print_feature_hint

if TYPE_CHECKING:
    from gitguard.auth.errors import DeviceAuthError
    from gitguard.auth.models import DeviceAuthRequest, Profile
    from gitguard.auth.session import SessionManager

LOGIN_FAILED = "Login failed. Please try again."


# ─────────────────────────────────────────────────────────────────────────────
# Device flow callbacks
# ─────────────────────────────────────────────────────────────────────────────


def _announce_request(request: DeviceAuthRequest, *, open_browser: bool) -> None:
    """Show the verification URL and open it unless disabled."""
    info("IMPORTANT: You must be logged into GitGuard in your browser first!")
    info("If you don't have an account, visit the web app to sign up.\n")
    info("Please authenticate in your browser.")
    if open_browser:
        info(f"Opening: {request.verification_url}")
        if not webbrowser.open(request.verification_url):
            info("If the browser does not open automatically, please visit the URL above.")
    else:
        info(f"Visit: {request.verification_url}")
    info("Waiting for authentication...")


def _heartbeat(_attempts: int) -> None:
    info("Still waiting for authentication...")


def _announce_fallback(_failure: DeviceAuthError) -> None:
    warning("Automatic authentication failed.")
    info("If you see your token in the browser, you can paste it below:\n")


def _prompt_token() -> str:
    return typer.prompt("Paste your token", default="", show_default=False)


def _report_profile(profile: Profile) -> None:
    success(f"Successfully logged in as {profile.identity}")
    info(f"Subscription: {profile.tier.value}")
    info(f"Daily scans remaining: {profile.limits.scans_remaining}/{profile.limits.daily_scans}")

    if profile.tier is Tier.FREE:
        return
    console.print("\nDefault scan features:")
    if profile.preferences.ai_scan:
        console.print("  [green]✓[/] AI-powered analysis enabled")
    if profile.tier is Tier.PREMIER and profile.preferences.dependency_scan:
        console.print("  [green]✓[/] Dependency scanning enabled")
    if profile.tier is Tier.PREMIER and profile.preferences.secret_scan:
        console.print("  [green]✓[/] Secret detection enabled")
    print_feature_hint(profile)


# ─────────────────────────────────────────────────────────────────────────────
# Flows
# ─────────────────────────────────────────────────────────────────────────────


def _device_login(manager: SessionManager, *, open_browser: bool) -> None:
    info("Initializing authentication...")
    try:
        profile = manager.login(
            prompt=_prompt_token,
            on_request=lambda request: _announce_request(request, open_browser=open_browser),
            on_fallback=_announce_fallback,
            on_pending=_heartbeat,
        )
    except AuthTimeoutError:
        exit_error("Authentication timed out. Please try again.")
    except AuthRequestExpiredError:
        exit_error("Authentication request expired. Please try again.")
    except GitGuardError as exc:
        handle_error(exc, fallback=LOGIN_FAILED, store=manager.store)
    _report_profile(profile)


def _password_login(manager: SessionManager, email: str, password: str | None) -> None:
    if password is None:
        password = typer.prompt("Password", hide_input=True)
    try:
        response = manager.login_with_password(email, password)
    except InvalidCredentialsError as exc:
        exit_error(exc.message)
    except GitGuardError as exc:
        handle_error(exc, fallback=LOGIN_FAILED, store=manager.store)
    success(f"Successfully logged in as {response.identity}")
    if response.tier is not None:
        info(f"Subscription: {response.tier.value}")


# ─────────────────────────────────────────────────────────────────────────────
# CLI command
# ─────────────────────────────────────────────────────────────────────────────


def login(
    email: str | None = typer.Option(
        None,
        "--email",
        "-e",
        help="Email address (switches to email/password login).",
    ),
    password: str | None = typer.Option(
        None,
        "--password",
        "-p",
        help="Password (prompted when --email is given without it).",
    ),
    no_browser: bool = typer.Option(
        False,
        "--no-browser",
        help="Print the verification URL instead of opening a browser.",
    ),
) -> None:
    """Authenticate with GitGuard.

    Opens the browser and waits for approval; if polling fails you can
    paste the token shown in the browser. With --email, logs in with
    email and password instead.
    """
    store = get_store()
    try:
        override = apply_endpoint_override(store)
    except GitGuardError as exc:
        handle_error(exc, fallback=LOGIN_FAILED)
    if override:
        info(f"Using API URL: {override}")

    with open_session(store) as manager:
        if email:
            _password_login(manager, email, password)
        else:
            _device_login(manager, open_browser=not no_browser)


__all__ = ["login"]
