"""
Abstract on-device store interface.

The mirror is a durable key-value byte store: each key holds one whole
value that is read and replaced as a unit.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from ..exceptions import ValidationError

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def validate_key(key: str) -> str:
    """Check that a key is safe to use as a file name.

    Raises:
        ValidationError: If the key is empty or contains path characters
    """
    if not _KEY_PATTERN.match(key):
        raise ValidationError("key", "must be alphanumeric, '.', '_' or '-'", key)
    return key


class MirrorStore(ABC):
    """Key-value byte store backing the on-device mirror."""

    @abstractmethod
    async def read(self, key: str) -> bytes | None:
        """Read the whole value stored under key.

        Returns:
            The stored bytes, or None if nothing is stored

        Raises:
            StorageIOError: If the device store cannot be read
        """

    @abstractmethod
    async def write(self, key: str, data: bytes) -> None:
        """Replace the whole value stored under key.

        Raises:
            StorageIOError: If the device store cannot be written
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove the value stored under key.

        Returns:
            True if a value was removed
        """

    async def close(self) -> None:
        """Release resources held by the store."""
