"""Persistence adapters for session state."""

from .cookies import PersistentCookieJar
from .session_store import (
    AUTH_SESSION,
    COOKIE_JAR_SESSION,
    FileSessionStore,
    InMemorySessionStore,
    SessionRecord,
    SessionStore,
)

__all__ = [
    "AUTH_SESSION",
    "COOKIE_JAR_SESSION",
    "FileSessionStore",
    "InMemorySessionStore",
    "PersistentCookieJar",
    "SessionRecord",
    "SessionStore",
]
