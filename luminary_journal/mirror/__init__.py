"""
On-device mirror storage.

A key-value byte store (file-backed or in-memory) and the entry mirror
that keeps the journal collection in it as one JSON array.

Example:
    >>> from luminary_journal.mirror import EntryMirror, FileMirrorStore
    >>> mirror = EntryMirror(FileMirrorStore("~/.luminary/mirror"))
    >>> entries = await mirror.load()
"""

from .base import MirrorStore
from .entry_mirror import DEFAULT_MIRROR_KEY, EntryMirror
from .file_store import FileMirrorStore
from .memory import InMemoryMirrorStore

__all__ = [
    "MirrorStore",
    "FileMirrorStore",
    "InMemoryMirrorStore",
    "EntryMirror",
    "DEFAULT_MIRROR_KEY",
]
