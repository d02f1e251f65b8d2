"""In-memory mirror store for tests and ephemeral sessions."""

from __future__ import annotations

from .base import MirrorStore, validate_key


class InMemoryMirrorStore(MirrorStore):
    """Mirror store holding values in a dict. Nothing survives the process."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._values: dict[str, bytes] = dict(initial or {})

    async def read(self, key: str) -> bytes | None:
        return self._values.get(validate_key(key))

    async def write(self, key: str, data: bytes) -> None:
        self._values[validate_key(key)] = bytes(data)

    async def delete(self, key: str) -> bool:
        return self._values.pop(validate_key(key), None) is not None

    def keys(self) -> list[str]:
        return list(self._values)
