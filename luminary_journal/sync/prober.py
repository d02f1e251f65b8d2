"""
Connectivity prober.

Answers "is the remote store reachable right now?" with a single
time-bounded ping. The result is an observability signal (for a
"connected to cloud" indicator); the persistence gateway does not consult
it and falls back on its own when a remote call fails.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..config import JournalConfig
from ..remote.client import RemoteEntryStore

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 1.2
DEFAULT_PROBE_INTERVAL = 30.0


class ConnectivityProber:
    """Periodic liveness checks against the remote store.

    Example:
        >>> prober = ConnectivityProber(remote, on_status_change=indicator.set)
        >>> await prober.start()  # probes now, then every 30 seconds
        >>> ...
        >>> await prober.stop()
    """

    def __init__(
        self,
        remote: RemoteEntryStore,
        interval: float = DEFAULT_PROBE_INTERVAL,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        on_status_change: Callable[[bool], None] | None = None,
    ) -> None:
        """Initialize the prober.

        Args:
            remote: Client for the remote store
            interval: Seconds between periodic probes
            timeout: Seconds a single probe may take before it counts as offline
            on_status_change: Called with the new state whenever it changes
        """
        self.remote = remote
        self.interval = interval
        self.timeout = timeout
        self.on_status_change = on_status_change

        self._online: bool | None = None
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_config(
        cls,
        remote: RemoteEntryStore,
        config: JournalConfig,
        on_status_change: Callable[[bool], None] | None = None,
    ) -> ConnectivityProber:
        return cls(
            remote,
            interval=config.probe_interval,
            timeout=config.probe_timeout,
            on_status_change=on_status_change,
        )

    @property
    def is_online(self) -> bool | None:
        """Result of the latest periodic probe; None before the first one."""
        return self._online

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check_connection(self) -> bool:
        """Probe the remote store once.

        Returns True only if the store answered with a success status within
        the timeout. Every failure, including a store that never answers,
        yields False.
        """
        try:
            await asyncio.wait_for(self.remote.ping(self.timeout), timeout=self.timeout)
            return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Connectivity probe failed: {e}")
            return False

    async def probe(self) -> bool:
        """Probe once and record the result, notifying on a change."""
        online = await self.check_connection()
        if online != self._online:
            self._online = online
            state = "online" if online else "offline"
            logger.info(f"Remote store is {state} ({self.remote.base_url})")
            if self.on_status_change:
                self.on_status_change(online)
        return online

    async def start(self) -> None:
        """Probe immediately, then keep probing in the background."""
        if self.is_running:
            return
        await self.probe()
        self._task = asyncio.create_task(self._probe_loop())

    async def stop(self) -> None:
        """Stop periodic probing."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _probe_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.probe()
