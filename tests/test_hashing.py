"""Tests for repostats.hashing."""

from __future__ import annotations

from hashlib import sha256

from repostats.hashing import content_digest, content_size


def test_digest_is_lowercase_sha256_hex() -> None:
    digest = content_digest(b"fn main() {}\n")

    assert digest == sha256(b"fn main() {}\n").hexdigest()
    assert digest == digest.lower()
    assert len(digest) == 64


def test_digest_is_pure_function_of_bytes() -> None:
    assert content_digest(b"same bytes") == content_digest(b"same bytes")
    assert content_digest(b"same bytes") != content_digest(b"same bytez")


def test_content_size_counts_bytes() -> None:
    assert content_size("é".encode("utf-8")) == 2
    assert content_size(b"") == 0
