"""Tests for snapshot export and import."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
from conftest import make_draft

from luminary_journal.exceptions import StorageIOError, ValidationError
from luminary_journal.snapshot import export_snapshot, load_snapshot, snapshot_filename
from luminary_journal.sync.gateway import PersistenceGateway


class TestSnapshotFilename:
    def test_named_after_day(self) -> None:
        assert snapshot_filename(date(2024, 5, 4)) == "wanderlust-traces-2024-05-04.json"

    def test_defaults_to_today(self) -> None:
        name = snapshot_filename()
        assert name.startswith("wanderlust-traces-")
        assert name.endswith(".json")


class TestExportSnapshot:
    async def test_writes_pretty_array(self, temp_dir: Path) -> None:
        entries = [make_draft("a").with_id("1"), make_draft("b").with_id("2")]
        path = temp_dir / snapshot_filename(date(2024, 5, 4))

        assert await export_snapshot(entries, path) == path

        text = path.read_text()
        assert text.startswith("[\n  {")
        assert [e["id"] for e in json.loads(text)] == ["1", "2"]


class TestLoadSnapshot:
    async def test_loads_exported_entries(self, temp_dir: Path) -> None:
        entries = [make_draft("a").with_id("1"), make_draft("b").with_id("local-5")]
        path = await export_snapshot(entries, temp_dir / "snap.json")

        assert await load_snapshot(path) == entries

    async def test_not_an_array_raises(self, temp_dir: Path) -> None:
        path = temp_dir / "snap.json"
        path.write_text('{"entries": []}')

        with pytest.raises(ValidationError):
            await load_snapshot(path)

    async def test_invalid_json_raises(self, temp_dir: Path) -> None:
        path = temp_dir / "snap.json"
        path.write_text("[{")

        with pytest.raises(ValidationError):
            await load_snapshot(path)

    async def test_empty_file_raises(self, temp_dir: Path) -> None:
        path = temp_dir / "snap.json"
        path.write_text("")

        with pytest.raises(ValidationError):
            await load_snapshot(path)

    async def test_invalid_record_names_index(self, temp_dir: Path) -> None:
        good = make_draft().with_id("1").to_dict()
        path = temp_dir / "snap.json"
        path.write_text(json.dumps([good, {**good, "latitude": 200}]))

        with pytest.raises(ValidationError) as exc_info:
            await load_snapshot(path)
        assert exc_info.value.field == "snapshot[1].latitude"

    async def test_missing_file_raises(self, temp_dir: Path) -> None:
        with pytest.raises(StorageIOError) as exc_info:
            await load_snapshot(temp_dir / "missing.json")
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    async def test_feeds_gateway_import(
        self, temp_dir: Path, offline_gateway: PersistenceGateway
    ) -> None:
        entries = [make_draft("restored").with_id("9")]
        path = await export_snapshot(entries, temp_dir / "snap.json")

        await offline_gateway.import_entries(await load_snapshot(path))

        assert (await offline_gateway.list_entries()).value == entries
