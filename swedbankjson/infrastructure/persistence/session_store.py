"""Session stores for persisted authentication state.

A store keeps JSON payloads keyed by a session id. Two fixed ids are used:
one for the :class:`SessionRecord` and one for the cookie jar.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from swedbankjson.domain import AppIdentity, ProfileType
from swedbankjson.infrastructure.observability import get_logger

logger = get_logger(__name__)

AUTH_SESSION = "swedbankjson_auth"
COOKIE_JAR_SESSION = "swedbankjson_cookiejar"


class SessionRecord(BaseModel):
    """The persisted part of an authenticated session.

    The live HTTP client and cookie jar are deliberately absent; both are
    rebuilt on the next request after a restore.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    app_id: str = Field(alias="appID")
    user_agent: str = Field(alias="userAgent")
    authorization_key: str = Field(alias="authorizationKey")
    profile_type: ProfileType = Field(alias="profileType")
    debug: bool = Field(default=False, alias="debugFlag")
    persistent: bool = Field(default=False, alias="persistentFlag")

    @classmethod
    def from_identity(
        cls,
        identity: AppIdentity,
        authorization_key: str,
        *,
        debug: bool = False,
        persistent: bool = False,
    ) -> "SessionRecord":
        return cls(
            app_id=identity.app_id,
            user_agent=identity.user_agent,
            authorization_key=authorization_key,
            profile_type=identity.profile_type,
            debug=debug,
            persistent=persistent,
        )

    def to_identity(self) -> AppIdentity:
        return AppIdentity(
            app_id=self.app_id,
            user_agent=self.user_agent,
            profile_type=self.profile_type,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class SessionStore(Protocol):
    """Storage for session payloads keyed by session id."""

    def load(self, session_id: str) -> dict[str, Any] | None: ...

    def save(self, session_id: str, payload: dict[str, Any]) -> None: ...

    def delete(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Keeps payloads for the lifetime of the process."""

    def __init__(self) -> None:
        self._payloads: dict[str, dict[str, Any]] = {}

    def load(self, session_id: str) -> dict[str, Any] | None:
        payload = self._payloads.get(session_id)
        return json.loads(json.dumps(payload)) if payload is not None else None

    def save(self, session_id: str, payload: dict[str, Any]) -> None:
        # Stored as a JSON copy so callers cannot mutate the saved state.
        self._payloads[session_id] = json.loads(json.dumps(payload))

    def delete(self, session_id: str) -> None:
        self._payloads.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._payloads


class FileSessionStore:
    """Stores each payload as ``<directory>/<session_id>.json``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, session_id: str) -> Path:
        return self.directory / f"{session_id}.json"

    def load(self, session_id: str) -> dict[str, Any] | None:
        path = self._path(session_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable session file {path}: {exc}")
            return None
        return payload if isinstance(payload, dict) else None

    def save(self, session_id: str, payload: dict[str, Any]) -> None:
        path = self._path(session_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

    def delete(self, session_id: str) -> None:
        self._path(session_id).unlink(missing_ok=True)


__all__ = [
    "AUTH_SESSION",
    "COOKIE_JAR_SESSION",
    "FileSessionStore",
    "InMemorySessionStore",
    "SessionRecord",
    "SessionStore",
]
