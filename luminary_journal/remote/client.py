"""
HTTP client for the remote entry store.

Talks to any service exposing:
- GET    /ping          liveness
- GET    /entries       full collection
- POST   /entries       create, returns the entry with its assigned id
- DELETE /entries/{id}  remove by id

Transport failures raise StorageConnectionError; a reachable store that
answers with a non-success status or an unusable body raises
RemoteStoreError.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any
from urllib.parse import quote

import aiohttp

from ..entries.types import EntryDraft, JournalEntry
from ..exceptions import RemoteStoreError, StorageConnectionError, ValidationError

logger = logging.getLogger(__name__)


class RemoteEntryStore:
    """Client for the remote entry store.

    Example:
        >>> async with RemoteEntryStore("http://localhost:3001") as remote:
        ...     entries = await remote.list_entries()
    """

    def __init__(self, base_url: str, request_timeout: float | None = None) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the store, e.g. http://localhost:3001
            request_timeout: Total timeout for entry requests. None keeps
                aiohttp's default limits.
        """
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> RemoteEntryStore:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            if self.request_timeout is not None:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self.request_timeout)
                )
            else:
                self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        payload: dict[str, Any] | None = None,
        timeout: float | None = None,
        decode: bool = True,
    ) -> Any:
        """Send a request and decode the JSON body.

        Args:
            decode: When False only the status is checked and the body is
                never read

        Returns:
            Decoded body, or None for an empty or undecoded body
        """
        session = await self._get_session()
        url = f"{self.base_url}{path}"
        kwargs: dict[str, Any] = {}
        if payload is not None:
            kwargs["json"] = payload
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        logger.debug(f"{method} {url}")
        try:
            async with session.request(method, url, **kwargs) as response:
                if not 200 <= response.status < 300:
                    body = await response.text()
                    raise RemoteStoreError(operation, response.status, body[:200] or None)
                if not decode:
                    return None
                try:
                    return await response.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    raise RemoteStoreError(
                        operation, response.status, f"invalid JSON body: {e}"
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise StorageConnectionError(url, e) from e

    async def ping(self, timeout: float) -> None:
        """Issue a liveness request bounded by ``timeout`` seconds.

        Raises:
            StorageConnectionError: If the store is unreachable or too slow
            RemoteStoreError: If the store answers with a failure status
        """
        await self._request("GET", "/ping", "ping", timeout=timeout, decode=False)

    async def list_entries(self) -> list[JournalEntry]:
        """Fetch the full collection.

        Records the store returns in an unusable shape are skipped.
        """
        data = await self._request("GET", "/entries", "list_entries")
        if not isinstance(data, list):
            raise RemoteStoreError("list_entries", reason="expected a JSON array")

        entries = []
        for index, record in enumerate(data):
            try:
                entries.append(JournalEntry.from_dict(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid remote record {index}: {e}")
        return entries

    async def create_entry(self, draft: EntryDraft) -> JournalEntry:
        """Submit a new entry and return it with its remote-issued id."""
        data = await self._request("POST", "/entries", "create_entry", payload=draft.to_dict())
        try:
            return JournalEntry.from_dict(data)
        except ValidationError as e:
            raise RemoteStoreError("create_entry", reason=f"invalid entry returned: {e}") from e

    async def delete_entry(self, entry_id: str) -> None:
        """Remove the entry with this id. The response body is ignored."""
        await self._request(
            "DELETE", f"/entries/{quote(entry_id, safe='')}", "delete_entry", decode=False
        )
