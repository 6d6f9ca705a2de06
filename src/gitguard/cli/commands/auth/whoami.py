"""Show the account behind the stored token."""

from __future__ import annotations

import json
import sys

from rich.panel import Panel

from gitguard.cli.common import (
    LOGIN_HINT,
    console,
    handle_error,
    info,
    open_session,
    warning,
)
from gitguard.exceptions import GitGuardError

from .common import JSON_OPTION, build_profile_table, print_feature_hint


def whoami(
    as_json: bool = JSON_OPTION,
) -> None:
    """Show current user information.

    Refreshes the stored subscription tier and default scan features from
    the server.
    """
    with open_session() as manager:
        try:
            profile = manager.whoami()
        except GitGuardError as exc:
            handle_error(exc, fallback="Failed to get user info", store=manager.store)

    if profile is None:
        warning("Not logged in")
        info(LOGIN_HINT)
        return

    if as_json:
        sys.stdout.write(json.dumps(profile.to_dict(), indent=2) + "\n")
        return

    console.print(Panel(build_profile_table(profile), title="GitGuard account", style="green"))
    print_feature_hint(profile)


__all__ = ["whoami"]
