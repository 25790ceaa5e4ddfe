"""Content fingerprints for change detection."""

from __future__ import annotations

import hashlib

from core.constants import HASH_ALGORITHM


def fingerprint_text(text: str) -> str:
    """Return the hex digest of UTF-8 encoded text."""
    return fingerprint_bytes(text.encode("utf-8"))


def fingerprint_bytes(data: bytes) -> str:
    """Hash raw bytes using the configured digest algorithm.

    Args:
        data: Content bytes.

    Returns:
        Fixed-width hex digest string.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(data)
    return hasher.hexdigest()
