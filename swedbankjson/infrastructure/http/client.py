"""HTTP transport for the Swedbank mobile app API.

This module owns the :class:`requests.Session` used to talk to the bank. It
builds requests against the versioned base URL, attaches the session cookies
and a fresh ``dsid`` cache-busting token to every call, classifies error
responses and decodes JSON bodies.

The backend is reached with TLS certificate verification disabled. This is a
compatibility exception for this one API, not a default to copy elsewhere.
"""

from __future__ import annotations

import json
import logging
import uuid
import warnings
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import BaseAdapter
from requests.cookies import RequestsCookieJar
from urllib3.exceptions import InsecureRequestWarning

from swedbankjson.errors import ApiError, DecodeError
from swedbankjson.infrastructure.observability import (
    close_wire_log,
    configure_wire_log,
    get_logger,
    write_wire_log,
)
from swedbankjson.infrastructure.observability.logging import DEFAULT_WIRE_LOG_PATH

from .tokens import generate_dsid

logger = get_logger(__name__)

DEFAULT_BASE_URI = "https://auth.api.swedbank.se/TDE_DAP_Portal_REST_WEB/api/"
DEFAULT_API_VERSION = "v4"
DEFAULT_TIMEOUT = 30.0
MAX_REDIRECTS = 10
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"

CookieJarFactory = Callable[[], RequestsCookieJar]


@dataclass
class ApiRequest:
    """A single call to the API, relative to the versioned base URL."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | bytes | None = None


class BankSession(requests.Session):
    """Session that sends the previous URL as Referer when redirected."""

    def rebuild_auth(self, prepared_request, response):
        super().rebuild_auth(prepared_request, response)
        # Never leak an https URL to a plain http hop.
        downgrade = response.url.startswith("https:") and prepared_request.url.startswith("http:")
        if not downgrade:
            prepared_request.headers["Referer"] = response.url


class ApiTransport:
    """Builds and dispatches requests for one authenticated session."""

    def __init__(
        self,
        *,
        authorization_key: str,
        user_agent: str,
        base_uri: str = DEFAULT_BASE_URI,
        api_version: str = DEFAULT_API_VERSION,
        cookie_jar_factory: CookieJarFactory = RequestsCookieJar,
        debug: bool = False,
        log_path: str = DEFAULT_WIRE_LOG_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        adapter: BaseAdapter | None = None,
    ) -> None:
        self.authorization_key = authorization_key
        self.user_agent = user_agent
        self.base_uri = base_uri
        self.api_version = api_version
        self.debug = debug
        self.log_path = log_path
        self.timeout = timeout
        self.cookie_jar: RequestsCookieJar | None = None
        self._cookie_jar_factory = cookie_jar_factory
        self._adapter = adapter
        self._client: requests.Session | None = None
        self._wire_owner = uuid.uuid4().hex
        self._wire_handler: logging.Handler | None = None

    @property
    def base_url(self) -> str:
        return f"{self.base_uri}{self.api_version}/"

    @property
    def client(self) -> requests.Session | None:
        return self._client

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": self.authorization_key,
            "Accept": "*/*",
            "Accept-Language": "sv-se",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Proxy-Connection": "keep-alive",
            "User-Agent": self.user_agent,
        }

    # -------------------- client lifecycle --------------------
    def ensure_client(self) -> requests.Session:
        """Return the HTTP client, creating it and a new cookie jar on first use.

        Raises:
            LoggingUnavailable: If debug is on and the wire log cannot be opened.
        """
        if self._client is not None:
            return self._client

        if self.debug and self._wire_handler is None:
            self._wire_handler = configure_wire_log(self.log_path, self._wire_owner)

        self.cookie_jar = self._cookie_jar_factory()
        client = BankSession()
        client.headers.update(self.headers)
        client.max_redirects = MAX_REDIRECTS
        client.verify = False
        client.cookies = self.cookie_jar
        if self._adapter is not None:
            client.mount("https://", self._adapter)
            client.mount("http://", self._adapter)
        if self._wire_handler is not None:
            owner = self._wire_owner
            client.hooks["response"].append(
                lambda response, *args, **kwargs: write_wire_log(owner, response)
            )

        logger.debug(f"Created HTTP client for {self.base_url}")
        self._client = client
        return client

    def set_credentials(self, authorization_key: str, user_agent: str) -> None:
        """Use a new authorization key and user agent, also on a live client."""
        self.authorization_key = authorization_key
        self.user_agent = user_agent
        if self._client is not None:
            self._client.headers.update(self.headers)

    def replace_cookie_jar(self, jar: RequestsCookieJar) -> None:
        """Move the current cookies into ``jar`` and use it from now on."""
        if self.cookie_jar is not None:
            jar.update(self.cookie_jar)
        self.cookie_jar = jar
        if self._client is not None:
            self._client.cookies = jar

    def close(self) -> None:
        """Clear every cookie, release the HTTP client and its wire log. Safe to repeat."""
        if self.cookie_jar is not None:
            self.cookie_jar.clear()
            self.cookie_jar.clear_session_cookies()
        if self._client is not None:
            self._client.close()
            self._client = None
        if self._wire_handler is not None:
            close_wire_log(self._wire_handler)
            self._wire_handler = None

    # -------------------- request pipeline --------------------
    def build_request(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> ApiRequest:
        """Prepare a request, creating the HTTP client if needed.

        Only POST carries a body. Strings and bytes are sent as they are;
        anything else is JSON encoded and labelled as JSON.
        """
        self.ensure_client()
        method = method.upper()
        request_headers: dict[str, str] = {}
        payload: str | bytes | None = None
        if method == "POST" and body is not None:
            if isinstance(body, (str, bytes)):
                payload = body
            else:
                request_headers["Content-Type"] = JSON_CONTENT_TYPE
                payload = json.dumps(body, separators=(",", ":"))
        if headers:
            request_headers.update(headers)
        return ApiRequest(method=method, path=path.lstrip("/"), headers=request_headers, body=payload)

    def dispatch(self, request: ApiRequest, query: Mapping[str, Any] | None = None) -> Any:
        """Send ``request`` and return the decoded JSON body.

        Raises:
            ApiError: If the API answers with a 4xx or 5xx status.
            DecodeError: If the body is not valid JSON.
        """
        client = self.ensure_client()
        dsid = generate_dsid()
        self.cookie_jar.set("dsid", dsid, path="/")
        params = {**(query or {}), "dsid": dsid}
        url = urljoin(self.base_url, request.path)

        logger.debug(f"{request.method} {url}")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", InsecureRequestWarning)
            response = client.request(
                request.method,
                url,
                params=params,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
                verify=False,
            )
        self._raise_for_status(response)
        return self._decode(response)

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.status_code < 400:
            return
        kind = "server" if response.status_code >= 500 else "client"
        logger.warning(
            f"API {kind} error {response.status_code} for {response.request.method} {response.url}"
        )
        raise ApiError(response.status_code, response.text, response.url)

    def _decode(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(
                f"Failed to parse JSON response: {exc}", response.text) from exc


__all__ = [
    "ApiRequest",
    "ApiTransport",
    "BankSession",
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_URI",
    "DEFAULT_TIMEOUT",
    "JSON_CONTENT_TYPE",
    "MAX_REDIRECTS",
]
