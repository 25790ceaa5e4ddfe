"""Version-history document persistence.

This module loads and writes the shared ``datasets_metadata.json``
document. The whole document is read once and replaced once per run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from core.constants import METADATA_JSON_INDENT
from core.errors import SheetSyncStoreError
from core.logging_config import get_logger
from core.types import DatasetEntry, VersionRecord

_LOGGER = get_logger(__name__)


class MetadataStore:
    """In-memory version history keyed by project id.

    The store is owned by a single sync run: load, mutate, then save.
    """

    def __init__(self, path: Path, projects: dict[str, list[DatasetEntry]] | None = None) -> None:
        """Create a store bound to a document path.

        Args:
            path: Location of the metadata JSON document.
            projects: Initial entries per project id.
        """
        self._path = path
        self._projects: dict[str, list[DatasetEntry]] = projects if projects is not None else {}

    @classmethod
    def load(cls, path: Path) -> "MetadataStore":
        """Load the document at path, or start empty when it is absent.

        Raises:
            SheetSyncStoreError: If the document exists but is malformed.
        """
        if not path.exists():
            return cls(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise SheetSyncStoreError(
                f"Failed to parse metadata document at {path}: {error.msg}. "
                "Fix or restore the file before syncing."
            ) from error
        return cls(path, projects_from_payload(payload, path))

    @property
    def path(self) -> Path:
        return self._path

    def project_ids(self) -> list[str]:
        return list(self._projects)

    def has_project(self, project_id: str) -> bool:
        return project_id in self._projects

    def entries(self, project_id: str) -> list[DatasetEntry]:
        """Return the mutable entry list for a project, creating it if needed."""
        return self._projects.setdefault(project_id, [])

    def find_entry(self, project_id: str, gid: str) -> DatasetEntry | None:
        for entry in self._projects.get(project_id, []):
            if entry.id == gid:
                return entry
        return None

    def sort_project(self, project_id: str, gid_order: Iterable[str]) -> None:
        """Reorder a project's entries to match manifest gid order.

        Entries whose gid is not in the manifest sort first, in their
        existing relative order.
        """
        rank = {gid: index for index, gid in enumerate(gid_order)}
        entries = self.entries(project_id)
        entries.sort(key=lambda entry: rank.get(entry.id, -1))

    def to_payload(self) -> dict[str, list[dict[str, Any]]]:
        return {
            project_id: [entry_to_dict(entry) for entry in entries]
            for project_id, entries in self._projects.items()
        }

    def save(self) -> None:
        """Replace the on-disk document with the in-memory state."""
        text = json.dumps(self.to_payload(), indent=METADATA_JSON_INDENT, ensure_ascii=False)
        self._path.write_text(text, encoding="utf-8")
        _LOGGER.info(
            "metadata_persisted",
            path=str(self._path),
            project_count=len(self._projects),
        )


def projects_from_payload(payload: Any, path: Path) -> dict[str, list[DatasetEntry]]:
    """Deserialize the document payload.

    Args:
        payload: Decoded JSON document.
        path: Source path for error messages.

    Returns:
        Entries per project id, preserving document order.

    Raises:
        SheetSyncStoreError: If the payload shape is invalid.
    """
    if not isinstance(payload, dict):
        raise SheetSyncStoreError(
            f"Failed to parse metadata document at {path}: "
            "expected JSON object at top level. Restore the file before syncing."
        )
    try:
        return {
            str(project_id): [entry_from_dict(item) for item in entries]
            for project_id, entries in payload.items()
        }
    except (KeyError, TypeError, ValueError) as error:
        raise SheetSyncStoreError(
            f"Invalid dataset entry in metadata document at {path}: {error}. "
            "Each entry needs an id and a versions list."
        ) from error


def entry_from_dict(payload: dict[str, Any]) -> DatasetEntry:
    return DatasetEntry(
        id=str(payload["id"]),
        versions=[record_from_dict(item) for item in payload["versions"]],
    )


def record_from_dict(payload: dict[str, Any]) -> VersionRecord:
    return VersionRecord(
        name=str(payload["name"]),
        raw_link=str(payload["rawLink"]),
        version=str(payload["version"]),
        size_in_bytes=int(payload["sizeInBytes"]),
    )


def entry_to_dict(entry: DatasetEntry) -> dict[str, Any]:
    return {"id": entry.id, "versions": [record_to_dict(record) for record in entry.versions]}


def record_to_dict(record: VersionRecord) -> dict[str, Any]:
    return {
        "name": record.name,
        "rawLink": record.raw_link,
        "version": record.version,
        "sizeInBytes": record.size_in_bytes,
    }
