"""Runtime configuration model for SheetSync.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LATEST_REF,
    DEFAULT_MANIFEST_URL,
    DEFAULT_RAW_BASE_URL,
    METADATA_FILE_NAME,
)
from core.errors import SheetSyncConfigError


@dataclass(frozen=True)
class SheetSyncConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory holding project folders and metadata.
        api_key: Google Sheets API key, required for sync runs.
        manifest_url: URL of the remote project manifest JSON.
        commit_ref: Commit reference used to pin superseded download links.
        raw_base_url: Base URL for generated raw download links.
        latest_ref: Ref segment used by links to the newest version.
        http_timeout_seconds: Timeout applied to each HTTP request.
    """

    data_root: Path
    api_key: str | None
    manifest_url: str
    commit_ref: str | None
    raw_base_url: str
    latest_ref: str
    http_timeout_seconds: float

    @classmethod
    def from_env(cls) -> "SheetSyncConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SheetSyncConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SHEETSYNC_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        timeout_value = os.getenv("SHEETSYNC_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            api_key=os.getenv("SHEETS_API_KEY") or None,
            manifest_url=os.getenv("SHEETSYNC_MANIFEST_URL", DEFAULT_MANIFEST_URL),
            commit_ref=os.getenv("CURRENT_COMMIT") or None,
            raw_base_url=os.getenv("SHEETSYNC_RAW_BASE_URL", DEFAULT_RAW_BASE_URL).rstrip("/"),
            latest_ref=os.getenv("SHEETSYNC_LATEST_REF", DEFAULT_LATEST_REF),
            http_timeout_seconds=_parse_timeout(timeout_value),
        )

    @property
    def metadata_path(self) -> Path:
        """Path of the shared version-history document."""
        return self.data_root / METADATA_FILE_NAME

    def require_api_key(self) -> str:
        """Return the API key or fail when it is not configured.

        Raises:
            SheetSyncConfigError: If no API key is set.
        """
        if not self.api_key:
            raise SheetSyncConfigError(
                "Missing Google Sheets API key. "
                "Set SHEETS_API_KEY before running a sync."
            )
        return self.api_key


def _parse_timeout(raw_value: str) -> float:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive timeout in seconds.

    Raises:
        SheetSyncConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise SheetSyncConfigError(
            "Invalid SHEETSYNC_HTTP_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set SHEETSYNC_HTTP_TIMEOUT to a numeric value."
        ) from error
    if timeout <= 0:
        raise SheetSyncConfigError(
            f"Invalid SHEETSYNC_HTTP_TIMEOUT value: {raw_value} is not positive. "
            "Set SHEETSYNC_HTTP_TIMEOUT to a value greater than zero."
        )
    return timeout
