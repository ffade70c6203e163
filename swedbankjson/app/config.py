"""Configuration utilities for swedbankjson.

Settings can come from a JSON file (:func:`load_config`) or from
``SWEDBANKJSON_*`` environment variables (:meth:`ClientConfig.from_env`).
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from swedbankjson.infrastructure.http.client import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URI,
    DEFAULT_TIMEOUT,
)
from swedbankjson.infrastructure.observability.logging import DEFAULT_WIRE_LOG_PATH
from swedbankjson.infrastructure.persistence import FileSessionStore

_ENV_VARS = {
    "base_uri": "SWEDBANKJSON_BASE_URI",
    "api_version": "SWEDBANKJSON_API_VERSION",
    "debug": "SWEDBANKJSON_DEBUG",
    "log_path": "SWEDBANKJSON_LOG_PATH",
    "timeout": "SWEDBANKJSON_TIMEOUT",
    "session_dir": "SWEDBANKJSON_SESSION_DIR",
}


class ClientConfig(BaseModel):
    """Settings shared by every session created by an application."""

    model_config = ConfigDict(extra="forbid")

    base_uri: str = DEFAULT_BASE_URI
    api_version: str = DEFAULT_API_VERSION
    debug: bool = False
    log_path: str = DEFAULT_WIRE_LOG_PATH
    timeout: float = DEFAULT_TIMEOUT
    session_dir: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Build a config from ``SWEDBANKJSON_*`` variables, defaults elsewhere."""
        env = os.environ if environ is None else environ
        values = {name: env[var] for name, var in _ENV_VARS.items() if env.get(var)}
        return cls.model_validate(values)

    def session_store(self) -> FileSessionStore | None:
        """Return a file store in ``session_dir``, or ``None`` when unset."""
        if self.session_dir is None:
            return None
        return FileSessionStore(self.session_dir)


def load_config(path: str | Path) -> ClientConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        The validated configuration.
    """
    with open(path, "r", encoding="utf-8") as f:
        return ClientConfig.model_validate(json.load(f))


__all__ = ["ClientConfig", "load_config"]
