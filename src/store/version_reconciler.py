"""Dataset version reconciliation.

This module compares freshly encoded CSV content against the file on
disk and the dataset's version history. It renames files that follow
an upstream sheet rename, writes changed content, and keeps the
history newest-first with at most one record per UTC date.
"""

from __future__ import annotations

from dataclasses import replace
import re
from pathlib import Path

from core.constants import CSV_FILE_SUFFIX
from core.errors import InvalidFetchError
from core.logging_config import get_logger
from core.types import DatasetEntry, ReconcileOutcome, ReconcileRequest, VersionRecord
from store.link_patterns import RawLinkBuilder
from store.metadata_store import MetadataStore
from transforms.fingerprint import fingerprint_bytes, fingerprint_text

_LOGGER = get_logger(__name__)
_DISALLOWED_NAME_CHARS = re.compile(r"[^a-z0-9-]")


def sanitize_sheet_name(sheet_name: str) -> str:
    """Derive a file-safe dataset name from a sheet display name.

    Args:
        sheet_name: Sheet title as shown in the spreadsheet.

    Returns:
        Lowercase name with spaces as ``-`` and other symbols as ``_``.
    """
    return _DISALLOWED_NAME_CHARS.sub("_", sheet_name.lower().replace(" ", "-"))


def reconcile_dataset(
    request: ReconcileRequest,
    store: MetadataStore,
    links: RawLinkBuilder,
) -> ReconcileOutcome:
    """Bring one dataset's file and version history up to date.

    Args:
        request: Fetched content and location for the dataset.
        store: Run-owned metadata store, mutated in place.
        links: Raw link builder for latest and pinned links.

    Returns:
        Reconcile outcome describing what changed.

    Raises:
        InvalidFetchError: If the request carries no sheet name.
        SheetSyncConfigError: If a prior version needs pinning without a commit ref.
        OSError: If the CSV file cannot be moved, read, or written.
    """
    if not request.sheet_name:
        raise InvalidFetchError(
            f"Invalid sheet name for GID {request.gid} in project {request.project_id}. "
            "Check that the sheet exists and its name is valid."
        )
    name = sanitize_sheet_name(request.sheet_name)
    file_name = f"{name}{CSV_FILE_SUFFIX}"
    file_path = request.project_dir / file_name
    entry = store.find_entry(request.project_id, request.gid)
    previous = entry.latest if entry is not None else None
    renamed = _follow_rename(request, previous, file_path)

    if _read_fingerprint(file_path) == fingerprint_text(request.csv_text):
        _LOGGER.info(
            "dataset_unchanged",
            project_id=request.project_id,
            gid=request.gid,
            file_name=file_name,
        )
        return ReconcileOutcome(status="unchanged", renamed=renamed, file_path=file_path)

    pinned_link = None
    if previous is not None:
        pinned_link = links.pinned(request.project_id, f"{previous.name}{CSV_FILE_SUFFIX}")
    file_path.write_bytes(request.csv_text.encode("utf-8"))
    record = VersionRecord(
        name=name,
        raw_link=links.latest(request.project_id, file_name),
        version=request.run_date,
        size_in_bytes=file_path.stat().st_size,
    )
    if entry is None:
        entry = DatasetEntry(id=request.gid)
        store.entries(request.project_id).append(entry)
    status = "created" if not entry.versions else "updated"
    apply_new_version(entry, record, pinned_link)
    _LOGGER.info(
        "dataset_versioned",
        project_id=request.project_id,
        gid=request.gid,
        file_name=file_name,
        version=record.version,
        size_in_bytes=record.size_in_bytes,
        version_count=len(entry.versions),
    )
    return ReconcileOutcome(status=status, renamed=renamed, file_path=file_path, record=record)


def apply_new_version(
    entry: DatasetEntry,
    record: VersionRecord,
    pinned_link: str | None,
) -> None:
    """Insert a new record at the front of an entry's history.

    The formerly newest record is re-linked to its pinned link first,
    then every record sharing the new record's date is dropped.

    Args:
        entry: Dataset entry to mutate.
        record: New newest version.
        pinned_link: Commit-pinned link for the formerly newest record.
    """
    if entry.versions:
        if pinned_link is not None:
            entry.versions[0] = replace(entry.versions[0], raw_link=pinned_link)
        entry.versions = [item for item in entry.versions if item.version != record.version]
    entry.versions.insert(0, record)


def _follow_rename(
    request: ReconcileRequest,
    previous: VersionRecord | None,
    file_path: Path,
) -> bool:
    """Move the previous file to the new name when the sheet was renamed."""
    if previous is None or f"{previous.name}{CSV_FILE_SUFFIX}" == file_path.name:
        return False
    old_path = request.project_dir / f"{previous.name}{CSV_FILE_SUFFIX}"
    if not old_path.exists():
        if file_path.exists():
            # Moved by an earlier run whose content matched, so the record kept its name.
            _LOGGER.debug(
                "dataset_rename_already_applied",
                project_id=request.project_id,
                gid=request.gid,
                old_name=previous.name,
                new_name=file_path.stem,
            )
            return False
        _LOGGER.warning(
            "dataset_rename_source_missing",
            project_id=request.project_id,
            gid=request.gid,
            old_path=str(old_path),
            new_path=str(file_path),
        )
        return False
    old_path.replace(file_path)
    _LOGGER.info(
        "dataset_renamed",
        project_id=request.project_id,
        gid=request.gid,
        old_name=previous.name,
        new_name=file_path.stem,
    )
    return True


def _read_fingerprint(file_path: Path) -> str:
    """Fingerprint existing file bytes, treating a missing file as empty."""
    existing = file_path.read_bytes() if file_path.exists() else b""
    return fingerprint_bytes(existing)
