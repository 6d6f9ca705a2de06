"""Authentication commands: login, logout, whoami."""

from .login import login
from .logout import logout
from .whoami import whoami

__all__ = ["login", "logout", "whoami"]
