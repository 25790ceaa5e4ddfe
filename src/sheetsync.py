"""Public SDK surface for SheetSync.

This module provides a stable import path for library users.
It re-exports the pipeline entry point and its building blocks.
"""

from __future__ import annotations

from core.config import SheetSyncConfig
from core.types import DatasetEntry, Project, SyncReport, VersionRecord
from fetch.manifest_fetch import fetch_manifest
from fetch.sheet_fetch import SheetFetcher
from store.metadata_store import MetadataStore
from store.version_reconciler import reconcile_dataset, sanitize_sheet_name
from sync.pipeline import SyncPipelineRunner, sync_datasets
from transforms.csv_encoding import encode_csv
from transforms.fingerprint import fingerprint_text
from transforms.row_sanitizer import sanitize_rows

__all__ = [
    "DatasetEntry",
    "MetadataStore",
    "Project",
    "SheetFetcher",
    "SheetSyncConfig",
    "SyncPipelineRunner",
    "SyncReport",
    "VersionRecord",
    "encode_csv",
    "fetch_manifest",
    "fingerprint_text",
    "reconcile_dataset",
    "sanitize_rows",
    "sanitize_sheet_name",
    "sync_datasets",
]
