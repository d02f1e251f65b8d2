"""
Shared test configuration and fixtures.

Remote stores run in-process on aiohttp test servers:
- the reference entry store (persisting to a temp directory)
- small stub apps for failure modes (error statuses, hanging pings)

An unreachable remote is a local port nothing listens on.
"""

from __future__ import annotations

import asyncio
import socket
import tempfile
from collections.abc import AsyncIterator, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from luminary_journal.entries.types import Category, EntryDraft
from luminary_journal.mirror import EntryMirror, InMemoryMirrorStore
from luminary_journal.remote.client import RemoteEntryStore
from luminary_journal.remote.server import create_app
from luminary_journal.sync.gateway import PersistenceGateway


def make_draft(note: str = "Park walk", **overrides) -> EntryDraft:
    """Create a test entry draft."""
    values = {
        "latitude": 51.4778,
        "longitude": -0.0015,
        "timestamp": datetime(2024, 5, 4, 10, 30, tzinfo=UTC),
        "date_display": "May 4, 2024, 10:30",
        "note": note,
        "category": Category.NATURE,
        "photo_url": None,
    }
    values.update(overrides)
    return EntryDraft(**values)


def server_url(server: TestServer) -> str:
    return f"http://{server.host}:{server.port}"


def unused_local_url() -> str:
    """URL of a local port with no listener (connections are refused)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
async def remote_server(temp_dir: Path) -> AsyncIterator[TestServer]:
    """Reference entry store with an empty database."""
    server = TestServer(create_app(temp_dir / "db.json", seed=False))
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
async def failing_server() -> AsyncIterator[TestServer]:
    """Reachable store that answers every request with a server error."""

    async def fail(request: web.Request) -> web.Response:
        return web.json_response({"error": "Internal Server Error"}, status=500)

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fail)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
async def hanging_server() -> AsyncIterator[TestServer]:
    """Store whose ping never answers until the test is torn down."""
    release = asyncio.Event()

    async def hang(request: web.Request) -> web.Response:
        await release.wait()
        return web.json_response({"status": "online"})

    app = web.Application()
    app.router.add_get("/ping", hang)
    server = TestServer(app)
    await server.start_server()
    yield server
    release.set()
    await server.close()


@pytest.fixture
def memory_store() -> InMemoryMirrorStore:
    return InMemoryMirrorStore()


@pytest.fixture
def mirror(memory_store: InMemoryMirrorStore) -> EntryMirror:
    return EntryMirror(memory_store)


@pytest.fixture
async def online_gateway(
    remote_server: TestServer, mirror: EntryMirror
) -> AsyncIterator[PersistenceGateway]:
    """Gateway whose remote store is reachable."""
    gateway = PersistenceGateway(RemoteEntryStore(server_url(remote_server)), mirror)
    yield gateway
    await gateway.close()


@pytest.fixture
async def offline_gateway(mirror: EntryMirror) -> AsyncIterator[PersistenceGateway]:
    """Gateway whose remote store refuses connections."""
    gateway = PersistenceGateway(RemoteEntryStore(unused_local_url()), mirror)
    yield gateway
    await gateway.close()
