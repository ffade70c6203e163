"""
swedbankjson package initializer.

This package provides a session-aware client for the JSON API behind the
Swedbank and Sparbanken mobile apps.

The package exposes a ``__version__`` attribute indicating the installed
version of swedbankjson. The version is read from pyproject.toml via
importlib.metadata – this is the single source of truth.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("swedbankjson")
except PackageNotFoundError:
    # Package is not installed (running from source without pip install -e .)
    __version__ = "0.0.0.dev"

from swedbankjson.domain import AppIdentity, ProfileType
from swedbankjson.errors import (
    ApiError,
    DecodeError,
    InvalidAppData,
    LoggingUnavailable,
    SessionUnavailable,
    SwedbankJsonError,
)
from swedbankjson.services import AuthFlow, AuthSession, AuthState, UnAuthFlow

__all__: list[str] = [
    "__version__",
    "ApiError",
    "AppIdentity",
    "AuthFlow",
    "AuthSession",
    "AuthState",
    "DecodeError",
    "InvalidAppData",
    "LoggingUnavailable",
    "ProfileType",
    "SessionUnavailable",
    "SwedbankJsonError",
    "UnAuthFlow",
]
