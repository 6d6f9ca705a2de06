"""Typer application for the ``gitguard`` command."""

from __future__ import annotations

import typer

from gitguard import __version__
from gitguard.cli.commands import login, logout, scan, whoami
from gitguard.cli.common import configure_logging, console

app = typer.Typer(
    name="gitguard",
    help="GitGuard CLI: authenticate and scan code for security vulnerabilities.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gitguard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logs on stderr.",
    ),
    version: bool = typer.Option(  # noqa: ARG001
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """GitGuard command-line interface."""
    configure_logging(verbose)


app.command()(login)
app.command()(logout)
app.command()(whoami)
app.command()(scan)


__all__ = ["app"]
