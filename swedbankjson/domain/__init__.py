"""Domain layer for swedbankjson.

Pure value types that do not concern HTTP or persistence details.
"""

from .identity import AppIdentity, ProfileType

__all__ = ["AppIdentity", "ProfileType"]
