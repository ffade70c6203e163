"""Shared fixtures: a fake transport adapter and a logged in session."""

from __future__ import annotations

import io
from collections import deque

import pytest
from requests import PreparedRequest, Response
from requests.adapters import BaseAdapter

from swedbankjson import AuthSession, UnAuthFlow
from swedbankjson.infrastructure.observability import close_wire_log

PRIVATE_APP_DATA = {
    "appID": "abc123XYZ",
    "useragent": "SwedbankMOBPrivateIOS/4.9.0_(iOS;_11.2)_Apple/iPhone9,3",
}
CORPORATE_APP_DATA = {
    "appID": "def456UVW",
    "useragent": "SwedbankMOBCorporateIOS/2.5.0_(iOS;_11.2)_Apple/iPhone9,3",
}


class FakeAdapter(BaseAdapter):
    """Answers requests from a queue of canned responses and records them."""

    def __init__(self) -> None:
        super().__init__()
        self.requests: list[PreparedRequest] = []
        self.timeouts: list[object] = []
        self._responses: deque[tuple[int, str, dict[str, str]] | Exception] = deque()

    def queue(self, status: int = 200, body: str = "{}", headers: dict[str, str] | None = None) -> None:
        self._responses.append((status, body, headers or {}))

    def fail(self, exc: Exception) -> None:
        """Raise ``exc`` from the next send, as a broken connection would."""
        self._responses.append(exc)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        item = self._responses.popleft() if self._responses else (200, "{}", {})
        if isinstance(item, Exception):
            raise item
        status, body, headers = item
        content = body.encode("utf-8")
        resp = Response()
        resp.status_code = status
        resp._content = content
        resp.raw = io.BytesIO(content)
        resp.headers.update(headers)
        resp.encoding = "utf-8"
        resp.url = request.url
        resp.request = request
        return resp

    def close(self) -> None:
        pass


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def make_adapter():
    return FakeAdapter


@pytest.fixture
def private_app_data() -> dict[str, str]:
    return dict(PRIVATE_APP_DATA)


@pytest.fixture
def corporate_app_data() -> dict[str, str]:
    return dict(CORPORATE_APP_DATA)


@pytest.fixture
def session(adapter: FakeAdapter) -> AuthSession:
    return AuthSession(UnAuthFlow(PRIVATE_APP_DATA), adapter=adapter).login()


@pytest.fixture(autouse=True)
def _close_wire_log():
    yield
    close_wire_log()
