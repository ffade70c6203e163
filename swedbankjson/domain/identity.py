"""App identity domain model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from swedbankjson.errors import InvalidAppData


class ProfileType(str, Enum):
    """Profile classification used by the API for the logged in user."""

    INDIVIDUAL = "privateProfile"
    CORPORATE = "corporateProfiles"

    @classmethod
    def from_user_agent(cls, user_agent: str) -> "ProfileType":
        """Corporate apps carry "Corporate" in their user agent."""
        if "Corporate" in user_agent:
            return cls.CORPORATE
        return cls.INDIVIDUAL


@dataclass(frozen=True)
class AppIdentity:
    """Identity of the bank app the client impersonates.

    Each bank variant (Swedbank, Sparbanken, youth and corporate apps) has
    its own app ID and user agent. The profile type is derived from the user
    agent once, when the identity is created.
    """

    app_id: str
    user_agent: str
    profile_type: ProfileType = ProfileType.INDIVIDUAL

    @classmethod
    def from_app_data(cls, app_data: Mapping[str, Any]) -> "AppIdentity":
        """Build an identity from an app data mapping.

        Args:
            app_data: Mapping with ``appID`` and ``useragent`` (or
                ``userAgent``) entries.

        Raises:
            InvalidAppData: If the mapping is missing either value.
        """
        if not isinstance(app_data, Mapping):
            raise InvalidAppData("Not valid app data.")
        app_id = app_data.get("appID")
        user_agent = app_data.get("useragent") or app_data.get("userAgent")
        if not app_id or not user_agent:
            raise InvalidAppData("Not valid app data.")
        return cls(
            app_id=str(app_id),
            user_agent=str(user_agent),
            profile_type=ProfileType.from_user_agent(str(user_agent)),
        )


__all__ = ["AppIdentity", "ProfileType"]
