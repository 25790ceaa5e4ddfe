"""Sync command wiring for SheetSync CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any

from core.config import SheetSyncConfig
from core.errors import SheetSyncError
from core.logging_config import get_logger
from sync.pipeline import sync_datasets

_LOGGER = get_logger(__name__)


def add_sync_command(subparsers: Any) -> None:
    """Register sync subcommand."""
    parser = subparsers.add_parser(
        "sync",
        help="Fetch every manifest dataset and record changed versions",
    )
    parser.add_argument("--manifest-url", help="Override SHEETSYNC_MANIFEST_URL for this run")
    parser.add_argument("--commit", help="Override CURRENT_COMMIT used to pin superseded links")


def run_sync_command(config: SheetSyncConfig, args: argparse.Namespace) -> int:
    """Execute one synchronization run and print its summary."""
    if args.manifest_url:
        config = replace(config, manifest_url=args.manifest_url)
    if args.commit:
        config = replace(config, commit_ref=args.commit)
    try:
        report = sync_datasets(config)
    except SheetSyncError as error:
        _LOGGER.error("sync_failed", error_type=type(error).__name__, detail=str(error))
        print(f"sync_error={error}")
        return 1
    print(
        f"projects={report.projects_synced}\t"
        f"versioned={report.datasets_versioned}\t"
        f"unchanged={report.datasets_unchanged}\t"
        f"renamed={report.datasets_renamed}"
    )
    return 0
