"""Shared options and rendering for authentication commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from rich.table import Table

from gitguard.auth.models import Tier
from gitguard.cli.common import console

if TYPE_CHECKING:
    from gitguard.auth.models import Profile

JSON_OPTION = typer.Option(
    False,
    "--json",
    "-j",
    help="Output as JSON for automation.",
)


def _flag(enabled: bool) -> str:
    return "[green]✓ Enabled[/]" if enabled else "[dim]✗ Disabled[/]"


def build_profile_table(profile: Profile) -> Table:
    """Build the account summary table.

    Args:
        profile: Profile returned by the server.

    Returns:
        Rich table with account, quota and default scan settings.
    """
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Email", profile.identity)
    table.add_row("Subscription", profile.tier.value)
    table.add_row("Daily scans", str(profile.limits.daily_scans))
    table.add_row("Remaining", str(profile.limits.scans_remaining))
    if profile.limits.resets_at:
        table.add_row("Resets", profile.limits.resets_at)

    if profile.tier is not Tier.FREE:
        table.add_row("AI analysis", _flag(profile.preferences.ai_scan))
    if profile.tier is Tier.PREMIER:
        table.add_row("Dependency scanning", _flag(profile.preferences.dependency_scan))
        table.add_row("Secret detection", _flag(profile.preferences.secret_scan))
    return table


def print_feature_hint(profile: Profile) -> None:
    """Explain how to override the default scan features (paid tiers only)."""
    if profile.tier is Tier.FREE:
        return
    console.print("\nUse --ai, --dependencies, or --secrets to override these defaults.")
    console.print("Use --no-ai, --no-dependencies, or --no-secrets to disable features.")


__all__ = ["JSON_OPTION", "build_profile_table", "print_feature_hint"]
