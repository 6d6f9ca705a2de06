"""Scan local source files for vulnerabilities."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from gitguard.auth.errors import RateLimitError
from gitguard.cli.common import (
    console,
    exit_error,
    get_store,
    handle_error,
    info,
    require_login,
    success,
    warning,
)
from gitguard.config import DEFAULT_MAX_FILES
from gitguard.exceptions import GitGuardError
from gitguard.scan import ScanClient, ScanOptions, ScanResult, Severity, collect_files

_SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.INFO: "dim",
}

# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────


def _build_findings_table(result: ScanResult) -> Table:
    table = Table(show_lines=False)
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Location")
    table.add_column("Description")
    for finding in result.findings:
        style = _SEVERITY_STYLES[finding.severity]
        table.add_row(
            f"[{style}]{finding.severity.value.upper()}[/]",
            finding.type,
            f"{finding.file}:{finding.line}",
            finding.description,
        )
    return table


def _render_summary(result: ScanResult) -> None:
    counts = ", ".join(f"{result.summary.get(s.value, 0)} {s.value}" for s in Severity)
    style = "red" if result.blocking else "green"
    body = f"Files scanned: {result.files_scanned}\nDuration: {result.duration_ms} ms\nFindings: {counts}"
    console.print(Panel(body, title="Scan summary", style=style))


def _render_result(result: ScanResult) -> None:
    if not result.findings:
        success("No vulnerabilities found")
        _render_summary(result)
        return
    console.print(_build_findings_table(result))
    for finding in result.findings:
        remediation = finding.ai_remediation or finding.remediation
        if remediation and finding.severity.rank <= Severity.HIGH.rank:
            console.print(f"  [dim]{finding.file}:{finding.line}[/] {remediation}")
    _render_summary(result)


def _describe_options(options: ScanOptions) -> None:
    enabled = [
        label
        for label, flag in (
            ("AI analysis", options.include_ai),
            ("dependency scanning", options.include_dependencies),
            ("secret detection", options.include_secrets),
        )
        if flag
    ]
    if enabled:
        info(f"Features: {', '.join(enabled)}")


# ─────────────────────────────────────────────────────────────────────────────
# CLI command
# ─────────────────────────────────────────────────────────────────────────────


def scan(
    directory: Path = typer.Option(
        Path("."),
        "--dir",
        "-d",
        help="Directory to scan.",
    ),
    ai: bool | None = typer.Option(
        None,
        "--ai/--no-ai",
        help="Enable or disable AI-powered analysis (default: account setting).",
    ),
    dependencies: bool | None = typer.Option(
        None,
        "--dependencies/--no-dependencies",
        help="Enable or disable dependency scanning (default: account setting).",
    ),
    secrets: bool | None = typer.Option(
        None,
        "--secrets/--no-secrets",
        help="Enable or disable secret detection (default: account setting).",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output the raw scan result as JSON.",
    ),
    max_files: int = typer.Option(
        DEFAULT_MAX_FILES,
        "--max-files",
        min=1,
        help="Maximum number of files submitted.",
    ),
) -> None:
    """Scan code for security vulnerabilities.

    Exits with code 1 when any critical or high severity finding is reported.
    """
    store = get_store()
    require_login(store)

    record = store.read()
    options = ScanOptions.resolve(
        record.tier,
        record.effective_preferences,
        ai=ai,
        dependencies=dependencies,
        secrets=secrets,
    )

    try:
        files = collect_files(directory, max_files=max_files)
    except GitGuardError as exc:
        exit_error(exc.message)
    if not files:
        warning(f"No code files found in {directory}")
        return

    if not as_json:
        info(f"Scanning {len(files)} file(s) in {directory}...")
        _describe_options(options)

    try:
        with ScanClient(store) as client:
            result = client.scan(files, options)
    except RateLimitError as exc:
        exit_error(exc.server_message or "Rate limit exceeded. Try again later or upgrade your plan.")
    except GitGuardError as exc:
        handle_error(exc, fallback="Scan failed", store=store)

    if as_json:
        sys.stdout.write(json.dumps(result.raw, indent=2) + "\n")
    else:
        _render_result(result)

    if result.blocking:
        raise typer.Exit(code=1)


__all__ = ["scan"]
