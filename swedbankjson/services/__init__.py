"""Session services for swedbankjson."""

from .auth import LOGOUT_PATH, AuthFlow, AuthSession, AuthState
from .flows import UnAuthFlow

__all__ = ["AuthFlow", "AuthSession", "AuthState", "LOGOUT_PATH", "UnAuthFlow"]
