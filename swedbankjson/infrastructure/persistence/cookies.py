"""Cookie jar that mirrors its contents into a session store."""

from __future__ import annotations

from typing import Any

from requests.cookies import RequestsCookieJar, create_cookie

from .session_store import COOKIE_JAR_SESSION, SessionStore


class PersistentCookieJar(RequestsCookieJar):
    """A :class:`RequestsCookieJar` that survives process restarts.

    Cookies are restored from ``store`` when the jar is created and written
    back whenever a cookie is set or cleared.
    """

    def __init__(self, store: SessionStore, session_id: str = COOKIE_JAR_SESSION) -> None:
        super().__init__()
        self._store = store
        self._session_id = session_id
        self._restore()

    def _restore(self) -> None:
        payload = self._store.load(self._session_id) or {}
        for item in payload.get("cookies", []):
            # Base class method so restoring does not write back.
            RequestsCookieJar.set_cookie(self, create_cookie(**item))

    def _save(self) -> None:
        cookies: list[dict[str, Any]] = [
            {
                "name": c.name,
                "value": c.value,
                "domain": c.domain,
                "path": c.path,
                "expires": c.expires,
                "secure": c.secure,
                "discard": c.discard,
            }
            for c in self
        ]
        self._store.save(self._session_id, {"cookies": cookies})

    def set_cookie(self, cookie, *args, **kwargs):
        super().set_cookie(cookie, *args, **kwargs)
        self._save()

    def clear(self, domain=None, path=None, name=None):
        super().clear(domain, path, name)
        self._save()


__all__ = ["PersistentCookieJar"]
