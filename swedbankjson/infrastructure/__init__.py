"""Infrastructure layer for swedbankjson.

Holds adapters for HTTP, session persistence and observability.
"""

from . import http, observability, persistence

__all__ = ["http", "observability", "persistence"]
