"""
File-backed mirror store.

Each key is one file in a directory. Writes go through a temp file and
an atomic rename, so readers never see a half-written value.

Directory structure:
{base_path}/
  luminary_journal_entries
  luminary_journal_entries.corrupt   (only after a bad blob was found)
"""

from __future__ import annotations

from pathlib import Path

from .base import MirrorStore, validate_key
from .file_ops import read_bytes, remove_file, write_bytes_atomic


class FileMirrorStore(MirrorStore):
    """Mirror store keeping one file per key."""

    def __init__(self, base_path: str | Path | None = None) -> None:
        """Initialize file store.

        Args:
            base_path: Directory holding the values (default ~/.luminary/mirror)
        """
        if base_path:
            self.base_path = Path(base_path).expanduser()
        else:
            self.base_path = Path.home() / ".luminary" / "mirror"

    def _path(self, key: str) -> Path:
        return self.base_path / validate_key(key)

    async def read(self, key: str) -> bytes | None:
        return await read_bytes(self._path(key))

    async def write(self, key: str, data: bytes) -> None:
        await write_bytes_atomic(self._path(key), data)

    async def delete(self, key: str) -> bool:
        return await remove_file(self._path(key))
