"""CLI command implementations."""

from .auth import login, logout, whoami
from .scan import scan

__all__ = ["login", "logout", "scan", "whoami"]
