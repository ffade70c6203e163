"""Exception types raised by swedbankjson."""

from __future__ import annotations

import json
from typing import Any


class SwedbankJsonError(Exception):
    """Base exception for all swedbankjson errors."""


class InvalidAppData(SwedbankJsonError, ValueError):
    """App data is missing an app ID or a user agent."""


class SessionUnavailable(SwedbankJsonError):
    """Persistence was requested but no session store is available."""


class LoggingUnavailable(SwedbankJsonError):
    """Diagnostics were requested but the wire log cannot be written."""


class DecodeError(SwedbankJsonError, ValueError):
    """The API answered with a body that is not valid JSON."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body


class ApiError(SwedbankJsonError):
    """The API answered with a 4xx or 5xx status.

    The original status code and body are kept so callers can tell an
    expired session apart from a rejected request.
    """

    def __init__(self, status_code: int, body: str = "", url: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        kind = "Server" if self.is_server_error else "Client"
        super().__init__(f"{status_code} {kind} Error for url: {url}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    def json(self) -> Any:
        """Decode the error body, returning ``None`` when it is not JSON."""
        try:
            return json.loads(self.body)
        except ValueError:
            return None


__all__ = [
    "ApiError",
    "DecodeError",
    "InvalidAppData",
    "LoggingUnavailable",
    "SessionUnavailable",
    "SwedbankJsonError",
]
