"""
Luminary Journal

Dual-persistence storage core for geo-tagged journal entries.

Provides:
- A persistence gateway serving entries from a remote store, falling back
  to an on-device mirror whenever the remote store fails
- A connectivity prober for "connected to cloud" indicators
- File-backed and in-memory mirror stores
- A reference aiohttp remote store
- JSON snapshot export and import

Usage:

    >>> from luminary_journal import ConnectivityProber, JournalConfig, PersistenceGateway
    >>> config = JournalConfig.load()
    >>> async with PersistenceGateway.from_config(config) as gateway:
    ...     prober = ConnectivityProber.from_config(gateway.remote, config)
    ...     await prober.start()
    ...
    ...     result = await gateway.list_entries()
    ...     if not result.from_remote:
    ...         print("Showing entries saved on this device")
    ...
    ...     created = await gateway.create_entry(draft)
    ...     if gateway.is_local_id(created.value.id):
    ...         print("Saved locally; the remote store was unavailable")
"""

from .config import JournalConfig
from .entries import (
    Category,
    DateRange,
    EntryDraft,
    JournalEntry,
    filter_by_date_range,
    sort_newest_first,
)
from .exceptions import (
    JournalStorageError,
    RemoteStoreError,
    StorageConnectionError,
    StorageIOError,
    ValidationError,
)
from .mirror import EntryMirror, FileMirrorStore, InMemoryMirrorStore, MirrorStore
from .remote import RemoteEntryStore
from .snapshot import export_snapshot, load_snapshot, snapshot_filename
from .sync import ConnectivityProber, GatewayResult, PersistenceGateway, ServedFrom

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "JournalConfig",
    # Entries
    "Category",
    "EntryDraft",
    "JournalEntry",
    "DateRange",
    "filter_by_date_range",
    "sort_newest_first",
    # Sync core
    "PersistenceGateway",
    "GatewayResult",
    "ServedFrom",
    "ConnectivityProber",
    # Storage
    "RemoteEntryStore",
    "MirrorStore",
    "FileMirrorStore",
    "InMemoryMirrorStore",
    "EntryMirror",
    # Snapshots
    "export_snapshot",
    "load_snapshot",
    "snapshot_filename",
    # Exceptions
    "JournalStorageError",
    "StorageConnectionError",
    "RemoteStoreError",
    "StorageIOError",
    "ValidationError",
]
