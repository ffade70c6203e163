"""Authentication and session lifecycle for the bank API.

An :class:`AuthSession` owns everything that makes up one logged in
session: the app identity, the authorization key, the cookie jar and the
HTTP client. Bank specific login steps are supplied by an :class:`AuthFlow`.

Failure policy for API calls:

- a 5xx answer clears the cookies and releases the client, then re-raises;
  the caller may log in again.
- a 4xx answer is taken as an invalid or expired session: a logout is
  attempted, everything is cleaned up, and the original error is re-raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol

import requests
from pydantic import ValidationError
from requests.adapters import BaseAdapter
from requests.cookies import RequestsCookieJar

from swedbankjson.app.config import ClientConfig
from swedbankjson.domain import AppIdentity, ProfileType
from swedbankjson.errors import (
    ApiError,
    InvalidAppData,
    SessionUnavailable,
    SwedbankJsonError,
)
from swedbankjson.infrastructure.http import ApiTransport, generate_authorization_key
from swedbankjson.infrastructure.observability import get_logger, log_context, log_exception
from swedbankjson.infrastructure.persistence import (
    AUTH_SESSION,
    COOKIE_JAR_SESSION,
    PersistentCookieJar,
    SessionRecord,
    SessionStore,
)

logger = get_logger(__name__)

LOGOUT_PATH = "identification/logout"


class AuthState(str, Enum):
    """Where a session is in its lifecycle."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    TERMINATED = "terminated"


class AuthFlow(Protocol):
    """Bank specific login steps.

    Implementations call :meth:`AuthSession.set_app_identity` and
    :meth:`AuthSession.set_authorization_key`, then run whatever
    challenge/response the bank requires through the session's request
    methods.
    """

    def login(self, session: "AuthSession") -> None: ...


class AuthSession:
    """One authenticated session against the bank API.

    Example usage:
        session = AuthSession(UnAuthFlow(app_data))
        session.login()
        profile = session.get("profile/")
        session.terminate()
    """

    def __init__(
        self,
        flow: AuthFlow | None = None,
        *,
        store: SessionStore | None = None,
        config: ClientConfig | None = None,
        adapter: BaseAdapter | None = None,
    ) -> None:
        """Create an unauthenticated session.

        Args:
            flow: Login steps run by :meth:`login`.
            store: Where persistent sessions are saved. Without one,
                persistence is unavailable.
            config: Endpoint, debug and timeout settings.
            adapter: Transport adapter mounted on the HTTP client, mainly
                for tests.
        """
        self.flow = flow
        self.config = config or ClientConfig()
        self._store = store
        self._adapter = adapter
        self._base_uri = self.config.base_uri
        self._debug = self.config.debug
        self._persistent = False
        self._identity: AppIdentity | None = None
        self._authorization_key: str | None = None
        self._transport: ApiTransport | None = None
        self._state = AuthState.UNAUTHENTICATED

    # -------------------- accessors --------------------
    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def identity(self) -> AppIdentity | None:
        return self._identity

    @property
    def profile_type(self) -> ProfileType | None:
        return self._identity.profile_type if self._identity else None

    @property
    def authorization_key(self) -> str | None:
        return self._authorization_key

    @property
    def persistent(self) -> bool:
        return self._persistent

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def client(self) -> requests.Session | None:
        """The live HTTP client, or ``None`` before first use and after cleanup."""
        return self._transport.client if self._transport else None

    @property
    def cookie_jar(self) -> RequestsCookieJar | None:
        return self._transport.cookie_jar if self._transport else None

    # -------------------- identity and key --------------------
    def set_app_identity(self, app_data: Mapping[str, Any]) -> AppIdentity:
        """Validate ``app_data`` and adopt it as this session's identity.

        Raises:
            InvalidAppData: If ``appID`` or the user agent is missing or empty.
        """
        self._identity = AppIdentity.from_app_data(app_data)
        self._sync_transport()
        if self._state in (AuthState.UNAUTHENTICATED, AuthState.TERMINATED):
            self._state = AuthState.AUTHENTICATING
        return self._identity

    def set_authorization_key(self, key: str = "") -> str:
        """Adopt ``key``, or generate a new one when it is empty."""
        if not key:
            if self._identity is None:
                raise InvalidAppData(
                    "App data must be set before generating an authorization key.")
            key = generate_authorization_key(self._identity.app_id)
        self._authorization_key = key
        self._sync_transport()
        return key

    def set_base_uri(self, base_uri: str) -> None:
        """Point the session at another API server. Exclude the version."""
        self._base_uri = base_uri
        if self._transport is not None:
            self._transport.base_uri = base_uri

    # -------------------- lifecycle --------------------
    def login(self) -> "AuthSession":
        """Run the configured flow and mark the session authenticated."""
        if self.flow is None:
            raise ValueError("No authentication flow configured.")
        with log_context(flow=type(self.flow).__name__):
            logger.info("Logging in")
            self.flow.login(self)
            if self._identity is None or self._authorization_key is None:
                raise InvalidAppData(
                    "Authentication flow did not set app data and an authorization key.")
            self._state = AuthState.AUTHENTICATED
            logger.info(f"Logged in with profile {self._identity.profile_type.value}")
        return self

    def terminate(self) -> Any:
        """Log out and clean up.

        Cleanup runs whether or not the logout call succeeds. If it fails,
        its error is raised after cleanup.

        Returns:
            The decoded logout response.
        """
        try:
            result = self._request("PUT", LOGOUT_PATH)
        finally:
            self.cleanup()
            self._state = AuthState.TERMINATED
        logger.info("Session terminated")
        return result

    def cleanup(self) -> None:
        """Clear all cookies, release the client and drop persisted state."""
        if self._transport is not None:
            self._transport.close()
        if self._persistent and self._store is not None:
            self._store.delete(AUTH_SESSION)
            self._store.delete(COOKIE_JAR_SESSION)

    # -------------------- persistence --------------------
    def enable_persistence(self) -> None:
        """Keep this session and its cookies in the session store.

        Raises:
            SessionUnavailable: If the session was created without a store.
        """
        if self._store is None:
            raise SessionUnavailable(
                "Can not persist the session, no session store is available.")
        self._persistent = True
        if self._transport is not None:
            self._transport.replace_cookie_jar(PersistentCookieJar(self._store))

    def save_session(self) -> SessionRecord:
        """Write the session record to the store.

        Raises:
            SessionUnavailable: If the session was created without a store.
        """
        if self._store is None:
            raise SessionUnavailable(
                "Can not save the session, no session store is available.")
        if self._identity is None or self._authorization_key is None:
            raise InvalidAppData(
                "App data and an authorization key are required to save a session.")
        record = SessionRecord.from_identity(
            self._identity,
            self._authorization_key,
            debug=self._debug,
            persistent=self._persistent,
        )
        self._store.save(AUTH_SESSION, record.to_payload())
        return record

    @classmethod
    def restore(
        cls,
        store: SessionStore,
        flow: AuthFlow | None = None,
        *,
        config: ClientConfig | None = None,
        adapter: BaseAdapter | None = None,
    ) -> "AuthSession | None":
        """Rebuild a saved session, or return ``None`` if none is stored.

        The HTTP client and cookie jar are created again on the next request.
        """
        payload = store.load(AUTH_SESSION)
        if payload is None:
            return None
        try:
            record = SessionRecord.model_validate(payload)
        except ValidationError as exc:
            logger.warning(f"Ignoring invalid stored session: {exc}")
            return None

        session = cls(flow, store=store, config=config, adapter=adapter)
        session._identity = record.to_identity()
        session._authorization_key = record.authorization_key
        session._debug = record.debug
        session._persistent = record.persistent
        session._state = AuthState.AUTHENTICATED
        return session

    # -------------------- requests --------------------
    def get(self, path: str, query: Mapping[str, Any] | None = None) -> Any:
        """Send a GET request and return the decoded JSON response."""
        return self._send("GET", path, query=query)

    def post(self, path: str, data: Any = None) -> Any:
        """Send a POST request with an optional JSON or raw string body."""
        return self._send("POST", path, body=data)

    def put(self, path: str) -> Any:
        """Send a PUT request and return the decoded JSON response."""
        return self._send("PUT", path)

    def delete(self, path: str) -> Any:
        """Send a DELETE request and return the decoded JSON response."""
        return self._send("DELETE", path)

    def _send(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        try:
            return self._request(method, path, query=query, body=body)
        except ApiError as exc:
            if exc.is_server_error:
                logger.error(f"Server error {exc.status_code}, cleaning up session")
                self.cleanup()
            else:
                logger.error(f"Client error {exc.status_code}, terminating session")
                self._terminate_after_error()
            raise

    def _request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        transport = self._ensure_transport()
        request = transport.build_request(method, path, body=body)
        return transport.dispatch(request, query)

    def _terminate_after_error(self) -> None:
        # The error that triggered this is the one the caller must see.
        try:
            self.terminate()
        except (SwedbankJsonError, requests.RequestException) as exc:
            log_exception(logger, "Logout after client error failed", exc)

    def _ensure_transport(self) -> ApiTransport:
        if self._transport is None:
            if self._identity is None:
                raise InvalidAppData("Not valid app data.")
            if self._authorization_key is None:
                self.set_authorization_key()
            self._transport = ApiTransport(
                authorization_key=self._authorization_key,
                user_agent=self._identity.user_agent,
                base_uri=self._base_uri,
                api_version=self.config.api_version,
                cookie_jar_factory=self._new_cookie_jar,
                debug=self._debug,
                log_path=self.config.log_path,
                timeout=self.config.timeout,
                adapter=self._adapter,
            )
        return self._transport

    def _sync_transport(self) -> None:
        if self._transport is not None and self._identity and self._authorization_key:
            self._transport.set_credentials(self._authorization_key, self._identity.user_agent)

    def _new_cookie_jar(self) -> RequestsCookieJar:
        if self._persistent and self._store is not None:
            return PersistentCookieJar(self._store)
        return RequestsCookieJar()


__all__ = ["AuthFlow", "AuthSession", "AuthState", "LOGOUT_PATH"]
