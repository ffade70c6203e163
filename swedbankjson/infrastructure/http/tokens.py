"""Authorization key and dsid generation."""

from __future__ import annotations

import base64
import hashlib
import random
import uuid

_rng = random.Random()


def generate_authorization_key(app_id: str) -> str:
    """Return a fresh authorization key for ``app_id``.

    The API expects ``base64("<app_id>:<UPPERCASE UUID4>")``.
    """
    raw = f"{app_id}:{str(uuid.uuid4()).upper()}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def dsid_source(rng: random.Random | None = None) -> str:
    """Pick the 8 dsid characters before they are shuffled.

    A slice of a SHA-1 hex digest at a random offset, with the last four
    characters uppercased.
    """
    rng = rng or _rng
    digest = hashlib.sha1(str(rng.randint(0, 2**31 - 1)).encode("ascii")).hexdigest()
    offset = rng.randint(1, 30)
    chars = digest[offset:offset + 8]
    return chars[:4] + chars[4:].upper()


def generate_dsid(rng: random.Random | None = None) -> str:
    """Return a new 8 character cache-busting token for one request."""
    rng = rng or _rng
    chars = list(dsid_source(rng))
    rng.shuffle(chars)
    return "".join(chars)


__all__ = ["dsid_source", "generate_authorization_key", "generate_dsid"]
