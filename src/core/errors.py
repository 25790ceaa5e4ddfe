"""SheetSync exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SheetSyncError(Exception):
    """Base exception for all SheetSync failures."""


class SheetSyncConfigError(SheetSyncError):
    """Raised for invalid runtime configuration."""


class SheetSyncFetchError(SheetSyncError):
    """Raised when a fetch failure must escalate past the fetch boundary."""


class InvalidFetchError(SheetSyncFetchError):
    """Raised when a dataset yields no sheet name or no rows."""


class SheetSyncStoreError(SheetSyncError):
    """Raised for metadata document and versioning failures."""
