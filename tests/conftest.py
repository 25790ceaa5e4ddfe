"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_SHEETSYNC_ENV_VARS = (
    "SHEETS_API_KEY",
    "CURRENT_COMMIT",
    "SHEETSYNC_DATA_ROOT",
    "SHEETSYNC_MANIFEST_URL",
    "SHEETSYNC_RAW_BASE_URL",
    "SHEETSYNC_LATEST_REF",
    "SHEETSYNC_HTTP_TIMEOUT",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host SheetSync settings out of every test."""
    for name in _SHEETSYNC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
