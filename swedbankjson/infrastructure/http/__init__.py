"""HTTP adapters for swedbankjson.

This package provides the request pipeline and token helpers used to talk
to the bank's mobile app API.
"""

from .client import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URI,
    JSON_CONTENT_TYPE,
    ApiRequest,
    ApiTransport,
)
from .tokens import dsid_source, generate_authorization_key, generate_dsid

__all__ = [
    "ApiRequest",
    "ApiTransport",
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_URI",
    "JSON_CONTENT_TYPE",
    "dsid_source",
    "generate_authorization_key",
    "generate_dsid",
]
