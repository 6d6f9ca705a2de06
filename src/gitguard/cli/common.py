"""Shared helpers for gitguard CLI commands."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from gitguard.auth.errors import AuthExpiredError, GatewayError, NetworkError
from gitguard.auth.gateway import HttpAuthGateway
from gitguard.auth.session import SessionManager
from gitguard.auth.store import CredentialStore
from gitguard.exceptions import GitGuardError

console = Console()
err_console = Console(stderr=True)


class CommandStatus(str, Enum):
    """Outcome of a command, mapped to a panel style."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


_STATUS_STYLES = {
    CommandStatus.OK: ("green", "✓"),
    CommandStatus.WARNING: ("yellow", "⚠"),
    CommandStatus.ERROR: ("red", "✗"),
}


@dataclass(slots=True)
class CommandResult:
    """Structured command outcome rendered by ``render_result``."""

    status: CommandStatus
    message: str
    payload: dict[str, Any] = field(default_factory=dict)


def render_result(result: CommandResult, *, as_json: bool = False) -> None:
    """Render a command result as a panel, or as JSON for automation."""
    if as_json:
        document = {"status": result.status.value, "message": result.message, **result.payload}
        sys.stdout.write(json.dumps(document, indent=2, default=str) + "\n")
        return
    style, icon = _STATUS_STYLES[result.status]
    console.print(Panel(result.message, title=f"{icon} {result.status.value.upper()}", style=style))


def info(message: str) -> None:
    """Print an informational line."""
    console.print(f"[blue]ℹ[/] {message}")


def success(message: str) -> None:
    """Print a success line."""
    console.print(f"[green]✓[/] {message}")


def warning(message: str) -> None:
    """Print a warning line."""
    console.print(f"[yellow]⚠[/] {message}")


def exit_error(message: str, *, hint: str | None = None, code: int = 1) -> NoReturn:
    """Print an error (and optional hint) then exit non-zero."""
    console.print(f"[red]✗[/] {message}")
    if hint:
        info(hint)
    raise typer.Exit(code=code)


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr through rich (DEBUG when verbose)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=verbose)],
        force=True,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Session wiring
# ─────────────────────────────────────────────────────────────────────────────

LOGIN_HINT = "Run 'gitguard login' to authenticate"


def get_store() -> CredentialStore:
    """Build the credential store for this invocation."""
    return CredentialStore()


@contextmanager
def open_session(store: CredentialStore | None = None) -> Generator[SessionManager, None, None]:
    """Yield a session manager whose HTTP client is closed afterwards."""
    store = store or get_store()
    with HttpAuthGateway(store) as gateway:
        yield SessionManager(store, gateway)


def require_login(store: CredentialStore) -> None:
    """Exit non-zero with a hint unless a token is stored."""
    if not store.is_authenticated():
        exit_error("Not logged in", hint=LOGIN_HINT)


def handle_error(exc: GitGuardError, *, fallback: str, store: CredentialStore | None = None) -> NoReturn:
    """Turn a library error into a message plus exit code 1.

    ``AuthExpiredError`` also clears the local session.
    """
    if isinstance(exc, AuthExpiredError):
        if store is not None and store.is_authenticated():
            store.clear_auth()
        exit_error("Authentication expired. Please login again.", hint=LOGIN_HINT)
    if isinstance(exc, NetworkError):
        exit_error(fallback, hint=f"Error: {exc.message}")
    if isinstance(exc, GatewayError) and exc.server_message:
        exit_error(exc.server_message)
    exit_error(fallback, hint=f"Error: {exc.message}")


__all__ = [
    "LOGIN_HINT",
    "CommandResult",
    "CommandStatus",
    "configure_logging",
    "console",
    "err_console",
    "exit_error",
    "get_store",
    "handle_error",
    "info",
    "open_session",
    "render_result",
    "require_login",
    "success",
    "warning",
]
