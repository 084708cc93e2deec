"""Content identity helpers."""

from __future__ import annotations

import hashlib

from .errors import SizeOverflowError

# Sizes are stored as signed 64-bit integers in the interchange document.
MAX_CONTENT_SIZE = 2**63 - 1


def content_digest(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def content_size(data: bytes, *, path: str | None = None) -> int:
    size = len(data)
    if size > MAX_CONTENT_SIZE:
        raise SizeOverflowError(
            f"Content length {size} does not fit a signed 64-bit integer", path=path
        )
    return size


__all__ = ["MAX_CONTENT_SIZE", "content_digest", "content_size"]
