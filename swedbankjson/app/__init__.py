"""Application-level settings for swedbankjson."""

from .config import ClientConfig, load_config

__all__ = ["ClientConfig", "load_config"]
