"""Authentication flows that ship with the library."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .auth import AuthSession


class UnAuthFlow:
    """Identify as a bank app without logging in a user.

    Used for the endpoints the apps call before login, such as the quick
    balance overview. A previously issued authorization key can be passed to
    resume it; otherwise a new one is generated.
    """

    def __init__(self, app_data: Mapping[str, Any], authorization_key: str = "") -> None:
        self.app_data = app_data
        self.authorization_key = authorization_key

    def login(self, session: "AuthSession") -> None:
        session.set_app_identity(self.app_data)
        session.set_authorization_key(self.authorization_key)


__all__ = ["UnAuthFlow"]
