"""Unit tests for the metadata document store."""

from __future__ import annotations

import json

import pytest

from core.errors import SheetSyncStoreError
from core.types import DatasetEntry, VersionRecord
from store.metadata_store import MetadataStore


def _record(version: str, name: str = "air-quality") -> VersionRecord:
    return VersionRecord(
        name=name,
        raw_link=f"https://raw.example.test/main/p1/{name}.csv",
        version=version,
        size_in_bytes=12,
    )


def test_load_returns_empty_store_when_missing(tmp_path) -> None:
    """A missing document should load as an empty mapping."""
    store = MetadataStore.load(tmp_path / "datasets_metadata.json")

    assert store.project_ids() == []


def test_save_writes_camel_case_keys(tmp_path) -> None:
    """Persisted records should use the published JSON field names."""
    path = tmp_path / "datasets_metadata.json"
    store = MetadataStore(path)
    store.entries("p1").append(DatasetEntry(id="42", versions=[_record("2024-01-02")]))

    store.save()

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["p1"][0]["versions"][0] == {
        "name": "air-quality",
        "rawLink": "https://raw.example.test/main/p1/air-quality.csv",
        "version": "2024-01-02",
        "sizeInBytes": 12,
    }


def test_save_pretty_prints_without_trailing_newline(tmp_path) -> None:
    """Document should be indented by two spaces with no trailing newline."""
    path = tmp_path / "datasets_metadata.json"
    store = MetadataStore(path)
    store.entries("p1")

    store.save()

    assert path.read_text(encoding="utf-8") == '{\n  "p1": []\n}'


def test_load_roundtrips_saved_document(tmp_path) -> None:
    """Loading a saved document should restore entries and order."""
    path = tmp_path / "datasets_metadata.json"
    store = MetadataStore(path)
    store.entries("p1").append(
        DatasetEntry(id="42", versions=[_record("2024-01-02"), _record("2024-01-01")])
    )
    store.save()

    loaded = MetadataStore.load(path)

    assert [record.version for record in loaded.entries("p1")[0].versions] == [
        "2024-01-02",
        "2024-01-01",
    ]


def test_load_raises_for_invalid_json(tmp_path) -> None:
    """Corrupt documents should raise a store error."""
    path = tmp_path / "datasets_metadata.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(SheetSyncStoreError):
        MetadataStore.load(path)


def test_load_raises_for_missing_fields(tmp_path) -> None:
    """Entries without versions should raise a store error."""
    path = tmp_path / "datasets_metadata.json"
    path.write_text(json.dumps({"p1": [{"id": "42"}]}), encoding="utf-8")

    with pytest.raises(SheetSyncStoreError):
        MetadataStore.load(path)


def test_sort_project_follows_manifest_order(tmp_path) -> None:
    """Entries should be reordered to the manifest gid order."""
    store = MetadataStore(tmp_path / "m.json")
    store.entries("p1").extend([DatasetEntry(id="7"), DatasetEntry(id="42")])

    store.sort_project("p1", ["42", "7"])

    assert [entry.id for entry in store.entries("p1")] == ["42", "7"]


def test_sort_project_puts_unknown_gids_first(tmp_path) -> None:
    """Entries no longer in the manifest should sort before known gids."""
    store = MetadataStore(tmp_path / "m.json")
    store.entries("p1").extend(
        [DatasetEntry(id="7"), DatasetEntry(id="old"), DatasetEntry(id="42")]
    )

    store.sort_project("p1", ["42", "7"])

    assert [entry.id for entry in store.entries("p1")] == ["old", "42", "7"]
