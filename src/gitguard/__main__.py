"""Entry point for ``python -m gitguard``."""

from gitguard.cli.app import app


def main() -> None:
    """Run the gitguard CLI."""
    app()


if __name__ == "__main__":
    main()
