"""
Persistence gateway.

A single entry point for reading and mutating the journal that hides
where the data is served from.

Architecture:
- Every operation tries the REMOTE store first
- On remote success, the on-device mirror is updated (write-through) so
  it stays a best-effort replica
- On any remote failure (unreachable, timeout, failure status, bad
  payload) the operation is carried out against the mirror instead
- Remote failures are never raised to the caller; each result carries a
  ServedFrom tag saying which path executed
- list_entries never raises: if the mirror is unreadable too, it returns
  an empty collection with the errors attached

Known limitations:
- Entries created while offline get a local-origin id and exist only in
  the mirror. They are not replayed to the remote store when it comes
  back, and the next successful list replaces the mirror with the remote
  collection, so they drop out of view.
- Deletes issued while offline are applied to the mirror only and are
  not retried against the remote store.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from ..config import JournalConfig
from ..entries.ids import LOCAL_ID_PREFIX, is_local_id
from ..entries.types import EntryDraft, JournalEntry
from ..exceptions import RemoteStoreError, StorageConnectionError, StorageIOError
from ..logging_utils import JournalLoggerAdapter
from ..mirror.entry_mirror import EntryMirror
from ..mirror.file_store import FileMirrorStore
from ..remote.client import RemoteEntryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Remote failures the gateway recovers from via the mirror
REMOTE_FAILURES = (StorageConnectionError, RemoteStoreError)


class ServedFrom(Enum):
    """Which store an operation was carried out against."""

    REMOTE = "remote"  # Remote confirmed; mirror updated
    LOCAL = "local"  # Mirror only


LOCAL_SOURCE = {"source": ServedFrom.LOCAL}


@dataclass
class GatewayResult(Generic[T]):
    """Outcome of a gateway operation.

    Attributes:
        value: The operation's result
        source: Store the operation was served from
        error: The swallowed remote failure, if the local path was taken
    """

    value: T
    source: ServedFrom
    error: str | None = None

    @property
    def from_remote(self) -> bool:
        return self.source is ServedFrom.REMOTE


class PersistenceGateway:
    """Remote-first entry store with an on-device fallback.

    Example:
        >>> gateway = PersistenceGateway(
        ...     remote=RemoteEntryStore("http://localhost:3001"),
        ...     mirror=EntryMirror(FileMirrorStore()),
        ... )
        >>> result = await gateway.list_entries()
        >>> result.value, result.source
    """

    def __init__(
        self,
        remote: RemoteEntryStore,
        mirror: EntryMirror,
        local_id_prefix: str = LOCAL_ID_PREFIX,
    ) -> None:
        """Initialize the gateway.

        Args:
            remote: Client for the remote store
            mirror: On-device mirror, owned by this gateway
            local_id_prefix: Prefix of ids minted while the remote is unavailable
        """
        self.remote = remote
        self.mirror = mirror
        self.local_id_prefix = local_id_prefix

    @classmethod
    def from_config(cls, config: JournalConfig) -> PersistenceGateway:
        """Build a gateway with an HTTP remote and a file-backed mirror."""
        return cls(
            remote=RemoteEntryStore(config.remote_url, request_timeout=config.request_timeout),
            mirror=EntryMirror(FileMirrorStore(config.local_path), key=config.mirror_key),
            local_id_prefix=config.local_id_prefix,
        )

    async def __aenter__(self) -> PersistenceGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.remote.close()
        await self.mirror.store.close()

    def is_local_id(self, entry_id: str) -> bool:
        """Whether an entry id was minted on the device."""
        return is_local_id(entry_id, self.local_id_prefix)

    async def list_entries(self) -> GatewayResult[list[JournalEntry]]:
        """Return the full collection.

        The remote collection replaces the mirror when it can be fetched;
        otherwise the mirror's current contents are returned.
        """
        log = JournalLoggerAdapter(logger, {"operation": "list_entries"})
        try:
            entries = await self.remote.list_entries()
        except REMOTE_FAILURES as e:
            log.warning(f"Remote list failed, serving from mirror: {e}", extra=LOCAL_SOURCE)
            try:
                entries = await self.mirror.load()
            except StorageIOError as io_error:
                log.error(f"Mirror unreadable, returning nothing: {io_error}", extra=LOCAL_SOURCE)
                return GatewayResult([], ServedFrom.LOCAL, f"{e}; {io_error}")
            return GatewayResult(entries, ServedFrom.LOCAL, str(e))

        await self._write_through(log, self.mirror.replace(entries))
        return GatewayResult(entries, ServedFrom.REMOTE)

    async def create_entry(self, draft: EntryDraft) -> GatewayResult[JournalEntry]:
        """Create an entry.

        On remote success the entry carries the remote-issued id. Otherwise
        it is stored in the mirror under a local-origin id.
        """
        log = JournalLoggerAdapter(logger, {"operation": "create_entry"})
        try:
            saved = await self.remote.create_entry(draft)
        except REMOTE_FAILURES as e:
            entry = await self.mirror.add_local(draft, prefix=self.local_id_prefix)
            log.warning(
                f"Remote create failed, saved locally as {entry.id}: {e}", extra=LOCAL_SOURCE
            )
            return GatewayResult(entry, ServedFrom.LOCAL, str(e))

        await self._write_through(log, self.mirror.upsert(saved))
        return GatewayResult(saved, ServedFrom.REMOTE)

    async def delete_entry(self, entry_id: str) -> GatewayResult[None]:
        """Delete an entry by id. Unknown ids are a no-op."""
        log = JournalLoggerAdapter(logger, {"operation": "delete_entry", "entry_id": entry_id})
        try:
            await self.remote.delete_entry(entry_id)
        except REMOTE_FAILURES as e:
            await self.mirror.remove(entry_id)
            log.warning(
                f"Remote delete failed, removed {entry_id} from mirror only: {e}",
                extra=LOCAL_SOURCE,
            )
            return GatewayResult(None, ServedFrom.LOCAL, str(e))

        await self._write_through(log, self.mirror.remove(entry_id))
        return GatewayResult(None, ServedFrom.REMOTE)

    async def import_entries(self, entries: Iterable[JournalEntry]) -> GatewayResult[None]:
        """Overwrite the mirror with an externally supplied collection.

        The remote store is not touched.
        """
        entries = list(entries)
        await self.mirror.replace(entries)
        logger.info(f"Imported {len(entries)} entries into the mirror")
        return GatewayResult(None, ServedFrom.LOCAL)

    async def _write_through(self, log: logging.LoggerAdapter, update: Awaitable[Any]) -> None:
        """Apply a mirror update after remote success; failures are logged only."""
        try:
            await update
        except StorageIOError as e:
            log.warning(f"Mirror write-through failed, replica may be stale: {e}")
