"""Project manifest fetching and parsing.

This module downloads the remote manifest JSON and converts it into
typed projects. Any failure yields an empty result with a typed reason.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.constants import DEFAULT_HEADERS_FLAG
from core.logging_config import get_logger
from core.types import DatasetSpec, FetchFailure, ManifestFetchResult, Project

_LOGGER = get_logger(__name__)


def fetch_manifest(url: str, http_client: httpx.Client) -> ManifestFetchResult:
    """Fetch and parse the project manifest.

    Args:
        url: Manifest JSON URL.
        http_client: Shared HTTP client for this run.

    Returns:
        Parsed projects, or an empty result with a failure reason.
    """
    try:
        response = http_client.get(url)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as error:
        return _failed(url, FetchFailure("transport_error", str(error)))
    except ValueError as error:
        return _failed(url, FetchFailure("parse_error", f"invalid JSON: {error}"))
    try:
        projects = parse_manifest(payload)
    except (KeyError, TypeError, ValueError) as error:
        return _failed(url, FetchFailure("parse_error", f"invalid manifest shape: {error}"))
    _LOGGER.info("manifest_fetched", url=url, project_count=len(projects))
    return ManifestFetchResult(projects=projects)


def parse_manifest(payload: Any) -> tuple[Project, ...]:
    """Convert a decoded manifest payload into projects.

    Args:
        payload: Decoded JSON value.

    Returns:
        Projects in manifest order.

    Raises:
        TypeError: If the payload is not a list of project objects.
        KeyError: If a project lacks its id.
    """
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return tuple(_parse_project(item) for item in payload)


def _parse_project(item: Any) -> Project:
    if not isinstance(item, dict):
        raise TypeError(f"expected a project object, got {type(item).__name__}")
    raw_tables = item.get("rawDataTables") or []
    if not isinstance(raw_tables, list):
        raise TypeError(f"rawDataTables for project {item['id']} must be an array")
    has_empty_spec = bool(raw_tables) and raw_tables[0] == {}
    specs = tuple(_parse_dataset_spec(table) for table in raw_tables)
    return Project(
        id=str(item["id"]),
        sheet_id=str(item.get("sheetId") or ""),
        raw_data_tables=specs,
        has_empty_spec=has_empty_spec,
    )


def _parse_dataset_spec(table: Any) -> DatasetSpec:
    if not isinstance(table, dict):
        raise TypeError(f"expected a dataset object, got {type(table).__name__}")
    if not table:
        return DatasetSpec(gid="")
    headers = table.get("headers")
    return DatasetSpec(
        gid=str(table["gid"]),
        query=table.get("query") or None,
        headers=DEFAULT_HEADERS_FLAG if headers is None else int(headers),
    )


def _failed(url: str, failure: FetchFailure) -> ManifestFetchResult:
    _LOGGER.error(
        "manifest_fetch_failed",
        url=url,
        reason=failure.reason,
        detail=failure.detail,
    )
    return ManifestFetchResult(failure=failure)
