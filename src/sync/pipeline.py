"""Synchronization orchestration.

This module walks the manifest's projects and datasets in order,
wiring fetch, sanitize, encode, and reconcile steps together. The
metadata document is written once, after every project succeeded.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import httpx

from core.config import SheetSyncConfig
from core.errors import InvalidFetchError, SheetSyncConfigError
from core.logging_config import get_logger
from core.types import DatasetSpec, Project, ReconcileRequest, SyncReport
from fetch.manifest_fetch import fetch_manifest
from fetch.sheet_fetch import SheetFetcher
from store.link_patterns import RawLinkBuilder
from store.metadata_store import MetadataStore
from store.version_reconciler import reconcile_dataset
from transforms.csv_encoding import encode_csv
from transforms.row_sanitizer import sanitize_rows

_LOGGER = get_logger(__name__)


class SyncPipelineRunner:
    """Sequential runner for one synchronization pass."""

    def __init__(
        self,
        config: SheetSyncConfig,
        http_client: httpx.Client,
        sheet_fetcher: SheetFetcher,
        run_date: str | None = None,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._fetcher = sheet_fetcher
        self._links = RawLinkBuilder.from_config(config)
        self._run_date = run_date or current_utc_date()

    def run(self) -> SyncReport:
        """Execute one sync pass and persist the metadata document.

        Returns:
            Summary of what the run changed.

        Raises:
            InvalidFetchError: If a dataset yields no sheet name or rows.
            SheetSyncConfigError: If versioned datasets exist but no commit ref is set.
            SheetSyncStoreError: If the metadata document is malformed.
            OSError: If project files cannot be read or written.
        """
        store = MetadataStore.load(self._config.metadata_path)
        report = SyncReport()
        manifest = fetch_manifest(self._config.manifest_url, self._http_client)
        report.manifest_failed = not manifest.ok
        self._check_commit_ref(manifest.projects, store)
        for project in manifest.projects:
            if not project.is_syncable:
                continue
            self._sync_project(project, store, report)
            report.projects_synced += 1
        store.save()
        _LOGGER.info(
            "sync_completed",
            run_date=self._run_date,
            manifest_failed=report.manifest_failed,
            projects_synced=report.projects_synced,
            datasets_versioned=report.datasets_versioned,
            datasets_unchanged=report.datasets_unchanged,
            datasets_renamed=report.datasets_renamed,
        )
        return report

    def _check_commit_ref(self, projects: tuple[Project, ...], store: MetadataStore) -> None:
        """Fail before any file is written when history could need pinning."""
        if self._links.commit_ref:
            return
        for project in projects:
            if not project.is_syncable:
                continue
            for spec in project.raw_data_tables:
                entry = store.find_entry(project.id, spec.gid)
                if entry is not None and entry.versions:
                    raise SheetSyncConfigError(
                        f"Project {project.id} has versioned datasets but no commit reference "
                        "is configured. Set CURRENT_COMMIT or pass --commit."
                    )

    def _sync_project(self, project: Project, store: MetadataStore, report: SyncReport) -> None:
        project_dir = self._config.data_root / project.id
        project_dir.mkdir(parents=True, exist_ok=True)
        store.entries(project.id)  # registers the project even if nothing is versioned
        for spec in project.raw_data_tables:
            self._sync_dataset(project, spec, project_dir, store, report)
        store.sort_project(project.id, project.gid_order)

    def _sync_dataset(
        self,
        project: Project,
        spec: DatasetSpec,
        project_dir: Path,
        store: MetadataStore,
        report: SyncReport,
    ) -> None:
        result = self._fetcher.fetch_table(project.sheet_id, spec.gid, spec.query, spec.headers)
        table = result.table
        if not result.ok or table is None or not table.sheet_name or not table.rows:
            raise InvalidFetchError(
                f"Invalid sheet name or empty data for GID {spec.gid} in project {project.id}. "
                "Check the sheet, its query, and the API key, then rerun the sync."
            )
        rows = sanitize_rows(table.rows, skip_header=table.has_header)
        request = ReconcileRequest(
            project_id=project.id,
            gid=spec.gid,
            sheet_name=table.sheet_name,
            csv_text=encode_csv(rows),
            project_dir=project_dir,
            run_date=self._run_date,
        )
        outcome = reconcile_dataset(request, store, self._links)
        if outcome.renamed:
            report.datasets_renamed += 1
        if outcome.status == "unchanged":
            report.datasets_unchanged += 1
        else:
            report.datasets_versioned += 1


def sync_datasets(config: SheetSyncConfig) -> SyncReport:
    """Run one synchronization pass with default collaborators.

    Args:
        config: Runtime configuration.

    Returns:
        Summary of what the run changed.

    Raises:
        SheetSyncConfigError: If the API key is missing.
        InvalidFetchError: If a dataset yields no sheet name or rows.
        SheetSyncStoreError: If the metadata document is malformed.
    """
    api_key = config.require_api_key()
    with httpx.Client(timeout=config.http_timeout_seconds) as http_client:
        fetcher = SheetFetcher(api_key, http_client)
        runner = SyncPipelineRunner(config, http_client, fetcher)
        return runner.run()


def current_utc_date() -> str:
    """Return today's UTC date as ``YYYY-MM-DD``."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")
