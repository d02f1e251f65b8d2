"""
Reference remote entry store.

A small aiohttp application that serves the remote-store contract used by
RemoteEntryStore and persists the collection to a JSON file.

Routes:
    GET    /ping          -> {"status": "online", "storage": "filesystem"}
    GET    /entries       -> full collection
    POST   /entries       -> 201, stored entry with an epoch-millisecond id
    DELETE /entries/{id}  -> {"success": true}, also for unknown ids

Usage:
    luminary-remote-store --port 3001 --db ./db.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from aiohttp import web

from ..entries.ids import unique_millis_id
from ..entries.types import Category, EntryDraft
from ..exceptions import StorageIOError, ValidationError
from ..logging_utils import configure_structured_logging
from ..mirror.file_ops import read_json, write_json_atomic

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3001
MAX_BODY_BYTES = 50 * 1024 * 1024

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def sample_entries(now: datetime | None = None) -> list[dict[str, Any]]:
    """Seed content for a new database."""
    when = (now or datetime.now(UTC)) - timedelta(days=2)
    return [
        {
            "id": "1",
            "latitude": 51.4778,
            "longitude": -0.0015,
            "timestamp": when.isoformat(),
            "dateDisplay": when.strftime("%b %d, %Y, %H:%M"),
            "note": (
                "Walking through Greenwich Park. "
                "The view of the city from the top of the hill is breathtaking."
            ),
            "category": Category.NATURE.value,
            "photoUrl": "https://picsum.photos/200/200?random=1",
        }
    ]


class EntryDatabase:
    """Entry collection persisted as a JSON array in one file."""

    def __init__(self, path: Path, seed: bool = True) -> None:
        self.path = path
        self.seed = seed
        self.entries: list[dict[str, Any]] = []
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        """Load the file, creating it (optionally seeded) if missing."""
        data = await read_json(self.path)
        if data is None:
            self.entries = sample_entries() if self.seed else []
            await self.save()
            logger.info(f"Initialized entry database at {self.path}")
            return
        if not isinstance(data, list):
            raise StorageIOError("load_database", str(self.path), ValueError("expected an array"))
        self.entries = data
        logger.info(f"Loaded {len(self.entries)} entries from {self.path}")

    async def save(self) -> None:
        await write_json_atomic(self.path, self.entries)

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Store a new entry and return it with its assigned id."""
        payload = dict(payload)
        payload.pop("id", None)
        if not payload.get("timestamp"):
            payload["timestamp"] = datetime.now(UTC).isoformat()
        draft = EntryDraft.from_dict(payload)

        async with self._lock:
            taken = {str(entry.get("id")) for entry in self.entries}
            entry = draft.with_id(unique_millis_id(taken)).to_dict()
            self.entries.append(entry)
            await self.save()
        return entry

    async def delete(self, entry_id: str) -> bool:
        async with self._lock:
            kept = [entry for entry in self.entries if str(entry.get("id")) != entry_id]
            removed = len(kept) != len(self.entries)
            self.entries = kept
            await self.save()
        return removed


DB_KEY = web.AppKey("entry_db", EntryDatabase)


@web.middleware
async def request_logging_middleware(
    request: web.Request, handler: Any
) -> web.StreamResponse:
    fields = {"method": request.method, "path": request.path}
    try:
        response = await handler(request)
    except web.HTTPException as e:
        logger.info(
            f"{request.method} {request.path} {e.status}", extra={**fields, "status": e.status}
        )
        raise
    logger.info(
        f"{request.method} {request.path} {response.status}",
        extra={**fields, "status": response.status},
    )
    return response


@web.middleware
async def cors_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=204)
    else:
        try:
            response = await handler(request)
        except web.HTTPException as e:
            e.headers.update(CORS_HEADERS)
            raise
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception(f"Server error handling {request.method} {request.path}")
        return web.json_response({"error": "Internal Server Error"}, status=500)


async def handle_ping(request: web.Request) -> web.Response:
    return web.json_response({"status": "online", "storage": "filesystem"})


async def handle_list(request: web.Request) -> web.Response:
    return web.json_response(request.app[DB_KEY].entries)


async def handle_create(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except json.JSONDecodeError:
        return web.json_response({"error": "Request body is not valid JSON"}, status=400)
    if not isinstance(payload, dict):
        return web.json_response({"error": "Entry must be a JSON object"}, status=400)

    try:
        entry = await request.app[DB_KEY].create(payload)
    except ValidationError as e:
        return web.json_response({"error": e.message, "details": e.details}, status=400)
    logger.info(f"Created entry {entry['id']}", extra={"entry_id": entry["id"]})
    return web.json_response(entry, status=201)


async def handle_delete(request: web.Request) -> web.Response:
    entry_id = request.match_info["entry_id"]
    if await request.app[DB_KEY].delete(entry_id):
        logger.info(f"Deleted entry {entry_id}", extra={"entry_id": entry_id})
    return web.json_response({"success": True})


def create_app(db_path: Path, seed: bool = True) -> web.Application:
    """Build the remote store application.

    Args:
        db_path: JSON file holding the collection
        seed: Whether a newly created database gets a sample entry
    """
    app = web.Application(
        client_max_size=MAX_BODY_BYTES,
        middlewares=[request_logging_middleware, cors_middleware, error_middleware],
    )
    app[DB_KEY] = EntryDatabase(db_path, seed=seed)

    async def load_database(app: web.Application) -> None:
        await app[DB_KEY].load()

    app.on_startup.append(load_database)
    app.router.add_get("/ping", handle_ping)
    app.router.add_get("/entries", handle_list)
    app.router.add_post("/entries", handle_create)
    app.router.add_delete("/entries/{entry_id}", handle_delete)
    return app


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the reference journal entry store.")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    parser.add_argument("--db", type=Path, default=Path("db.json"), help="JSON database file")
    parser.add_argument("--no-seed", action="store_true", help="Start a new database empty")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON logs")
    args = parser.parse_args(argv)

    if args.json_logs:
        configure_structured_logging(logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s  %(message)s")

    logger.info(f"Entry store persisting to {args.db.resolve()}")
    web.run_app(create_app(args.db, seed=not args.no_seed), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
