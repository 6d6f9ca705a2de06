"""Log out and revoke the stored token."""

from __future__ import annotations

from gitguard.cli.common import (
    CommandResult,
    CommandStatus,
    handle_error,
    open_session,
    render_result,
    warning,
)
from gitguard.exceptions import GitGuardError


def logout() -> None:
    """Log out from GitGuard.

    The token is revoked on the server when possible; the local session is
    cleared either way.
    """
    with open_session() as manager:
        try:
            outcome = manager.logout()
        except GitGuardError as exc:
            handle_error(exc, fallback="Logout failed", store=manager.store)

    if outcome is None:
        warning("Not logged in")
        return

    if outcome.revoked:
        message = f"Token revoked on server\nLogged out {outcome.identity}"
        status = CommandStatus.OK
    else:
        message = f"Could not revoke token on server (continuing with local logout)\nLogged out {outcome.identity}"
        status = CommandStatus.WARNING
    render_result(
        CommandResult(
            status=status,
            message=message,
            payload={"email": outcome.identity, "revoked": outcome.revoked},
        )
    )


__all__ = ["logout"]
