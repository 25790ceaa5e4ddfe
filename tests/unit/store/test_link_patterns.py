"""Unit tests for raw link construction."""

from __future__ import annotations

import pytest

from core.errors import SheetSyncConfigError
from store.link_patterns import RawLinkBuilder


def test_latest_link_uses_latest_ref() -> None:
    """Latest links should track the moving ref."""
    links = RawLinkBuilder("https://raw.example.test/datasets", "main", "abc123")

    assert links.latest("p1", "air.csv") == "https://raw.example.test/datasets/main/p1/air.csv"


def test_pinned_link_uses_commit_ref() -> None:
    """Pinned links should embed the commit reference."""
    links = RawLinkBuilder("https://raw.example.test/datasets", "main", "abc123")

    assert links.pinned("p1", "air.csv") == "https://raw.example.test/datasets/abc123/p1/air.csv"


def test_pinned_link_requires_commit_ref() -> None:
    """Pinning without a commit reference should fail loudly."""
    links = RawLinkBuilder("https://raw.example.test/datasets", "main")

    with pytest.raises(SheetSyncConfigError):
        links.pinned("p1", "air.csv")
