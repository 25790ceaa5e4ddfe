"""Shared typed models.

This module defines the data models used by fetch, transforms,
store, and sync layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Union

from core.constants import DEFAULT_HEADERS_FLAG

Cell = Union[str, int, float, bool, None]
Row = list[Cell]

FetchFailureReason = Literal[
    "transport_error",
    "parse_error",
    "sheet_not_found",
    "invalid_sheet_name",
    "malformed_payload",
]
ReconcileStatus = Literal["created", "updated", "unchanged"]


@dataclass(frozen=True)
class DatasetSpec:
    """One exported table within a spreadsheet.

    Attributes:
        gid: Stable sheet identifier used to correlate across runs.
        query: Optional visualization query applied server-side.
        headers: 1 to synthesize a header row from column labels, else 0.
    """

    gid: str
    query: str | None = None
    headers: int = DEFAULT_HEADERS_FLAG


@dataclass(frozen=True)
class Project:
    """One spreadsheet and the tables it exports.

    Attributes:
        id: Project identifier, also the project directory name.
        sheet_id: Google spreadsheet id.
        raw_data_tables: Ordered dataset specs from the manifest.
        has_empty_spec: Whether the first manifest spec was an empty object.
    """

    id: str
    sheet_id: str
    raw_data_tables: tuple[DatasetSpec, ...]
    has_empty_spec: bool = False

    @property
    def is_syncable(self) -> bool:
        """Whether the project declares at least one usable dataset."""
        return bool(self.raw_data_tables) and not self.has_empty_spec

    @property
    def gid_order(self) -> list[str]:
        """Dataset gids in manifest order."""
        return [spec.gid for spec in self.raw_data_tables]


@dataclass(frozen=True)
class FetchedTable:
    """Rows fetched for one dataset.

    Attributes:
        sheet_name: Display name of the sheet the rows came from.
        rows: Row matrix; the first row is the header when has_header.
        has_header: Whether rows starts with a synthesized header row.
    """

    sheet_name: str | None
    rows: list[Row]
    has_header: bool = False


@dataclass(frozen=True)
class FetchFailure:
    """Typed reason for a soft fetch failure.

    Attributes:
        reason: Failure category.
        detail: Human-readable description.
    """

    reason: FetchFailureReason
    detail: str


@dataclass(frozen=True)
class ManifestFetchResult:
    """Outcome of a manifest fetch."""

    projects: tuple[Project, ...] = ()
    failure: FetchFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class TableFetchResult:
    """Outcome of a table fetch."""

    table: FetchedTable | None = None
    failure: FetchFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.table is not None


@dataclass(frozen=True)
class VersionRecord:
    """One historical snapshot of a dataset CSV export.

    Attributes:
        name: Sanitized sheet name; the file is ``<name>.csv``.
        raw_link: Download URL for this version.
        version: UTC date string in ``YYYY-MM-DD`` format.
        size_in_bytes: Size of the CSV file when written.
    """

    name: str
    raw_link: str
    version: str
    size_in_bytes: int


@dataclass
class DatasetEntry:
    """Version history for one dataset, most recent first.

    Attributes:
        id: Dataset gid.
        versions: Version records ordered newest first.
    """

    id: str
    versions: list[VersionRecord] = field(default_factory=list)

    @property
    def latest(self) -> VersionRecord | None:
        return self.versions[0] if self.versions else None


@dataclass(frozen=True)
class ReconcileRequest:
    """Input bundle for reconciling one dataset.

    Attributes:
        project_id: Owning project identifier.
        gid: Dataset gid.
        sheet_name: Fetched sheet display name.
        csv_text: Encoded CSV content for this run.
        project_dir: Directory holding the project's CSV files.
        run_date: UTC date of the run in ``YYYY-MM-DD`` format.
    """

    project_id: str
    gid: str
    sheet_name: str | None
    csv_text: str
    project_dir: Path
    run_date: str


@dataclass(frozen=True)
class ReconcileOutcome:
    """Result of reconciling one dataset.

    Attributes:
        status: Whether a version was created, replaced, or skipped.
        renamed: Whether the CSV was moved to a new file name.
        file_path: Target CSV path for this dataset.
        record: Newly inserted version record, None when unchanged.
    """

    status: ReconcileStatus
    renamed: bool
    file_path: Path
    record: VersionRecord | None = None


@dataclass
class SyncReport:
    """Summary of one synchronization run."""

    manifest_failed: bool = False
    projects_synced: int = 0
    datasets_unchanged: int = 0
    datasets_versioned: int = 0
    datasets_renamed: int = 0
