"""GitGuard CLI - security scanning for developers.

The package is organised around the authentication core:

- ``gitguard.auth``: credential store, device-auth poller, session manager
- ``gitguard.scan``: file collection and remote scan submission
- ``gitguard.cli``: typer commands (``login``, ``logout``, ``whoami``, ``scan``)
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
