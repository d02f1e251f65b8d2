"""
On-device entry mirror.

The mirror is a best-effort replica of the entry collection, stored as a
single JSON array under one fixed key. Each mutation reads the whole
array, computes the new array and writes it back.

Mutations are serialized through an asyncio.Lock so two overlapping
writers in one process cannot lose each other's update. Appends merge by
id: an entry whose id is already present replaces the stored one in place.

Corruption handling:
    A blob that is not a JSON array is copied to ``{key}.corrupt`` and the
    mirror reads as empty (fail closed). Individual records that fail
    validation are skipped.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Iterable

from ..entries.ids import LOCAL_ID_PREFIX, is_local_id, local_entry_id
from ..entries.types import EntryDraft, JournalEntry
from ..exceptions import ValidationError
from .base import MirrorStore, validate_key

logger = logging.getLogger(__name__)

DEFAULT_MIRROR_KEY = "luminary_journal_entries"
CORRUPT_SUFFIX = ".corrupt"


def encode_entries(entries: Iterable[JournalEntry]) -> bytes:
    """Serialize entries to the mirror blob format."""
    return json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False).encode("utf-8")


class EntryMirror:
    """Entry collection stored as one blob in a MirrorStore."""

    def __init__(
        self,
        store: MirrorStore,
        key: str = DEFAULT_MIRROR_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the mirror.

        Args:
            store: Byte store holding the blob
            key: Fixed key of the blob
            clock: Source of the current time, used when minting local ids
        """
        self.store = store
        self.key = validate_key(key)
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def corrupt_key(self) -> str:
        return f"{self.key}{CORRUPT_SUFFIX}"

    async def load(self) -> list[JournalEntry]:
        """Read the current contents. An absent blob reads as empty."""
        raw = await self.store.read(self.key)
        if raw is None or not raw.strip():
            return []

        try:
            records = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            await self._quarantine(raw, f"invalid JSON: {e}")
            return []
        if not isinstance(records, list):
            await self._quarantine(raw, f"expected an array, got {type(records).__name__}")
            return []

        entries = []
        for index, record in enumerate(records):
            try:
                entries.append(JournalEntry.from_dict(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid mirror record {index}: {e}")
        return entries

    async def replace(self, entries: Iterable[JournalEntry]) -> None:
        """Overwrite the mirror with the given collection."""
        entries = list(entries)
        async with self._lock:
            await self.store.write(self.key, encode_entries(entries))
        logger.debug(f"Mirror replaced with {len(entries)} entries")

    async def upsert(self, entry: JournalEntry) -> JournalEntry:
        """Append an entry, replacing any stored entry with the same id."""
        async with self._lock:
            entries = await self.load()
            for index, existing in enumerate(entries):
                if existing.id == entry.id:
                    entries[index] = entry
                    break
            else:
                entries.append(entry)
            await self.store.write(self.key, encode_entries(entries))
        return entry

    async def add_local(self, draft: EntryDraft, prefix: str = LOCAL_ID_PREFIX) -> JournalEntry:
        """Append a draft under a freshly minted local-origin id."""
        async with self._lock:
            entries = await self.load()
            taken = {existing.id for existing in entries}
            entry = draft.with_id(local_entry_id(taken, prefix=prefix, now=self._clock()))
            entries.append(entry)
            await self.store.write(self.key, encode_entries(entries))
        return entry

    async def remove(self, entry_id: str) -> bool:
        """Remove the entry with this id.

        Returns:
            True if an entry was removed; False if the id was not present
        """
        async with self._lock:
            entries = await self.load()
            kept = [entry for entry in entries if entry.id != entry_id]
            if len(kept) == len(entries):
                return False
            await self.store.write(self.key, encode_entries(kept))
        return True

    async def local_entries(self, prefix: str = LOCAL_ID_PREFIX) -> list[JournalEntry]:
        """Entries minted on the device that the remote store has never seen."""
        return [entry for entry in await self.load() if is_local_id(entry.id, prefix)]

    async def _quarantine(self, raw: bytes, reason: str) -> None:
        logger.warning(
            f"Mirror blob '{self.key}' is malformed ({reason}); "
            f"preserved as '{self.corrupt_key}' and treated as empty"
        )
        await self.store.write(self.corrupt_key, raw)
