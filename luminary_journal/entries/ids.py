"""ID generation and parsing utilities for journal entries.

Centralizes the ID format knowledge so callers never need to
construct or inspect entry IDs directly.

Remote IDs: opaque strings issued by the remote store (the reference
server uses epoch milliseconds).
Local IDs: local-{epoch_ms}, minted on the device when the remote store
could not be reached.
"""

from __future__ import annotations

import time
from collections.abc import Container

LOCAL_ID_PREFIX = "local-"


def epoch_millis(now: float | None = None) -> int:
    """Milliseconds since the epoch for ``now`` (default: current time)."""
    return int((time.time() if now is None else now) * 1000)


def unique_millis_id(taken: Container[str], prefix: str = "", now: float | None = None) -> str:
    """Time-derived ID that does not collide with any ID in ``taken``.

    Two IDs minted within the same millisecond are bumped forward.
    """
    millis = epoch_millis(now)
    while f"{prefix}{millis}" in taken:
        millis += 1
    return f"{prefix}{millis}"


def local_entry_id(
    taken: Container[str], prefix: str = LOCAL_ID_PREFIX, now: float | None = None
) -> str:
    """Mint a local-origin entry ID."""
    return unique_millis_id(taken, prefix=prefix, now=now)


def is_local_id(entry_id: str, prefix: str = LOCAL_ID_PREFIX) -> bool:
    """Whether an ID was minted on the device rather than by the remote store."""
    return entry_id.startswith(prefix)
