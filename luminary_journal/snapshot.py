"""
Journal snapshots.

A snapshot is a pretty-printed JSON array of entries, the same record
shape the mirror stores. Exporting writes one; loading validates one so
it can be handed to ``PersistenceGateway.import_entries``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime
from pathlib import Path

from .entries.types import JournalEntry
from .exceptions import StorageIOError, ValidationError
from .mirror.file_ops import read_json, write_json_atomic


def snapshot_filename(day: date | None = None) -> str:
    """Default file name for a snapshot taken on ``day`` (default: today, UTC)."""
    day = day or datetime.now(UTC).date()
    return f"wanderlust-traces-{day.isoformat()}.json"


async def export_snapshot(entries: Iterable[JournalEntry], path: Path) -> Path:
    """Write entries to ``path`` atomically.

    Returns:
        The path written
    """
    await write_json_atomic(path, [entry.to_dict() for entry in entries], indent=2)
    return path


async def load_snapshot(path: Path) -> list[JournalEntry]:
    """Read and validate a snapshot.

    Raises:
        ValidationError: If the file is not a JSON array of valid entries
        StorageIOError: If the file cannot be read
    """
    try:
        data = await read_json(path, missing_ok=False)
    except StorageIOError as e:
        if e.operation == "parse_json":
            raise ValidationError("snapshot", "not valid JSON", str(path)) from e
        raise
    if not isinstance(data, list):
        raise ValidationError("snapshot", "must be a JSON array of entries", str(path))

    entries = []
    for index, record in enumerate(data):
        try:
            entries.append(JournalEntry.from_dict(record))
        except ValidationError as e:
            raise ValidationError(f"snapshot[{index}].{e.field}", e.reason, e.value) from e
    return entries
