"""
File operations for on-device storage.

Provides atomic read/write operations for whole-file values with:
- Atomic writes using temp file + rename
- fsync before rename so a crash leaves either the old or the new value
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from ..exceptions import StorageIOError


async def ensure_directory(path: Path) -> None:
    """Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure exists
    """
    try:
        await aiofiles.os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise StorageIOError("create_directory", str(path), e) from e


async def read_bytes(path: Path, missing_ok: bool = True) -> bytes | None:
    """Read a whole file.

    Args:
        path: Path to read
        missing_ok: Return None for a missing file instead of raising

    Returns:
        File content or None if file doesn't exist
    """
    try:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()
    except FileNotFoundError as e:
        if missing_ok:
            return None
        raise StorageIOError("read", str(path), e) from e
    except OSError as e:
        raise StorageIOError("read", str(path), e) from e


async def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write a whole file atomically using temp file + rename.

    Args:
        path: Target path
        data: Content to write
    """
    await ensure_directory(path.parent)

    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".tmp_",
        suffix=path.suffix or ".bin",
    )
    try:
        os.close(fd)
        async with aiofiles.open(temp_path, "wb") as f:
            await f.write(data)
            await f.flush()
            os.fsync(f.fileno())

        # Atomic rename
        await aiofiles.os.rename(temp_path, path)
    except Exception as e:
        # Clean up temp file on error
        try:
            await aiofiles.os.remove(temp_path)
        except OSError:
            pass
        raise StorageIOError("write", str(path), e) from e


async def read_json(path: Path, missing_ok: bool = True) -> Any | None:
    """Read a JSON file.

    Args:
        path: Path to JSON file
        missing_ok: Return None for a missing file instead of raising

    Returns:
        Parsed JSON data or None if file doesn't exist or is blank
    """
    content = await read_bytes(path, missing_ok=missing_ok)
    if content is None or not content.strip():
        return None
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StorageIOError("parse_json", str(path), e) from e


async def write_json_atomic(path: Path, data: Any, indent: int | None = 2) -> None:
    """Write JSON file atomically.

    Args:
        path: Target path for JSON file
        data: Data to serialize as JSON
        indent: Indentation passed to json.dumps
    """
    payload = json.dumps(data, indent=indent, ensure_ascii=False)
    await write_bytes_atomic(path, payload.encode("utf-8"))


async def remove_file(path: Path) -> bool:
    """Remove a file if it exists.

    Args:
        path: Path to remove

    Returns:
        True if file was removed, False if it didn't exist
    """
    try:
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)
            return True
        return False
    except OSError as e:
        raise StorageIOError("remove", str(path), e) from e

