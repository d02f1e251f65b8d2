"""
Remote entry store.

Provides the HTTP client the gateway talks to and a reference aiohttp
server implementing the same contract.
"""

from .client import RemoteEntryStore
from .server import create_app

__all__ = [
    "RemoteEntryStore",
    "create_app",
]
