"""SheetSync CLI entry points.
This module exposes commands for syncing sheets and inspecting history.
It maps argparse commands onto pipeline and store calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.sync_command import add_sync_command, run_sync_command
from core.config import SheetSyncConfig
from core.errors import SheetSyncStoreError
from store.metadata_store import MetadataStore


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="sheetsync",
        description="Sync spreadsheet tables into versioned CSV files",
    )
    parser.add_argument("--data-root", help="Override SHEETSYNC_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_sync_command(subparsers)
    _add_versions_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the SheetSync CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args.data_root)
    if args.command == "sync":
        return run_sync_command(config, args)
    if args.command == "versions":
        return _run_versions_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(data_root: str | None) -> SheetSyncConfig:
    """Build config with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Runtime configuration.
    """
    config = SheetSyncConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return config


def _add_versions_command(subparsers: Any) -> None:
    """Register versions subcommand."""
    parser = subparsers.add_parser("versions", help="List recorded dataset versions")
    parser.add_argument("project", help="Project id")
    parser.add_argument("--dataset", help="Only list versions of this dataset gid")


def _run_versions_command(config: SheetSyncConfig, args: argparse.Namespace) -> int:
    """Handle versions command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        store = MetadataStore.load(config.metadata_path)
    except SheetSyncStoreError as error:
        print(f"store_error={error}")
        return 1
    if not store.has_project(args.project):
        print(f"unknown_project={args.project}")
        return 1
    for entry in store.entries(args.project):
        if args.dataset and entry.id != args.dataset:
            continue
        for record in entry.versions:
            print(
                f"{entry.id}\t"
                f"{record.version}\t"
                f"{record.name}\t"
                f"{record.size_in_bytes}\t"
                f"{record.raw_link}"
            )
    return 0
