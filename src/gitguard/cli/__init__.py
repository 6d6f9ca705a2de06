"""Command-line interface for gitguard."""
