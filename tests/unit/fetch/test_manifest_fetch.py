"""Unit tests for manifest fetching."""

from __future__ import annotations

import json

import httpx

from fetch.manifest_fetch import fetch_manifest, parse_manifest
from tests.sheet_fakes import MANIFEST_URL, build_http_client, fixture_text


def _manifest_payload() -> list[dict[str, object]]:
    return json.loads(fixture_text("manifest/projects.json"))


def test_fetch_manifest_parses_projects() -> None:
    """Manifest fetch should return every project in order."""
    client = build_http_client(_manifest_payload(), gviz="")

    result = fetch_manifest(MANIFEST_URL, client)

    assert [project.id for project in result.projects] == ["air-quality", "placeholder", "no-tables"]


def test_fetch_manifest_normalizes_gids_and_headers() -> None:
    """Dataset gids should be strings and headers should default to one."""
    projects = parse_manifest([{"id": "p", "sheetId": "s", "rawDataTables": [{"gid": 42}]}])

    spec = projects[0].raw_data_tables[0]

    assert (spec.gid, spec.headers, spec.query) == ("42", 1, None)


def test_fetch_manifest_keeps_explicit_zero_headers() -> None:
    """An explicit headers flag of zero should be preserved."""
    projects = parse_manifest(_manifest_payload())

    assert projects[0].raw_data_tables[1].headers == 0


def test_projects_with_empty_first_spec_are_not_syncable() -> None:
    """An empty first dataset object should mark the project as skipped."""
    projects = parse_manifest(_manifest_payload())

    assert [project.is_syncable for project in projects] == [True, False, False]


def test_fetch_manifest_soft_fails_on_http_error() -> None:
    """Non-2xx responses should yield an empty result with a transport reason."""
    client = build_http_client(httpx.Response(500, text="boom"), gviz="")

    result = fetch_manifest(MANIFEST_URL, client)

    assert result.projects == () and result.failure is not None
    assert result.failure.reason == "transport_error"


def test_fetch_manifest_soft_fails_on_invalid_json() -> None:
    """Unparseable bodies should yield an empty result with a parse reason."""
    client = build_http_client(httpx.Response(200, text="not json"), gviz="")

    result = fetch_manifest(MANIFEST_URL, client)

    assert result.failure is not None and result.failure.reason == "parse_error"


def test_fetch_manifest_soft_fails_on_wrong_shape() -> None:
    """A JSON object instead of an array should be treated as a parse failure."""
    client = build_http_client({"projects": []}, gviz="")

    result = fetch_manifest(MANIFEST_URL, client)

    assert result.ok is False and result.projects == ()


def test_later_empty_spec_is_kept_without_gid() -> None:
    """An empty dataset object after the first should stay in the project."""
    projects = parse_manifest(
        [{"id": "p", "sheetId": "s", "rawDataTables": [{"gid": 1}, {}]}]
    )

    assert projects[0].is_syncable and projects[0].gid_order == ["1", ""]
