"""aiohttp application exposing the push endpoint.

Routes::

    GET  /               static frontend
    GET  /events         validator token (dashboard "Validate server")
    POST /events         DevicesSeen push batches
    GET  /clients/{mac}  last known record for one client, or {}
    GET  /clients[/]     clients seen within the recency window
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from aiohttp import web

from cmxpush.config import PushConfig
from cmxpush.endpoint import PushEndpoint
from cmxpush.storage import ClientStore, open_store

_logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

ENDPOINT_KEY = web.AppKey("endpoint", PushEndpoint)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def decode_mac(value: str) -> str:
    """Treat ``+`` as a space in an already percent-decoded ``/clients/{mac}`` segment."""
    return value.replace("+", " ")


@web.middleware
async def compression_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    response = await handler(request)
    if isinstance(response, web.Response) and response.body and "Content-Encoding" not in response.headers:
        response.enable_compression()
    return response


async def index(request: web.Request) -> web.StreamResponse:
    return web.FileResponse(STATIC_DIR / "index.html")


async def get_events(request: web.Request) -> web.Response:
    # The dashboard compares this body byte-for-byte with its validator.
    return web.Response(text=request.app[ENDPOINT_KEY].validator_token())


async def post_events(request: web.Request) -> web.Response:
    body = await request.read()
    await request.app[ENDPOINT_KEY].ingest(request.headers.get("Content-Type"), body)
    return web.Response(text="")


async def get_client(request: web.Request) -> web.Response:
    mac = decode_mac(request.match_info["mac"])
    _logger.debug("Request name is %s", mac)
    return web.json_response(await request.app[ENDPOINT_KEY].lookup(mac))


async def list_clients(request: web.Request) -> web.Response:
    return web.json_response(await request.app[ENDPOINT_KEY].recent())


def create_app(
    config: PushConfig,
    store: ClientStore | None = None,
    *,
    clock: Callable[[], float] = time.time,
) -> web.Application:
    """Build the web application.

    The store's schema is initialized on startup and the store is closed on
    cleanup. When *store* is omitted it is opened from ``config.database_url``.
    """
    if store is None:
        store = open_store(config.database_url)
    endpoint = PushEndpoint(config, store, clock=clock)

    app = web.Application(middlewares=[compression_middleware])
    app[ENDPOINT_KEY] = endpoint

    async def _startup(app: web.Application) -> None:
        await app[ENDPOINT_KEY].store.initialize()

    async def _cleanup(app: web.Application) -> None:
        await app[ENDPOINT_KEY].store.close()

    app.on_startup.append(_startup)
    app.on_cleanup.append(_cleanup)

    app.router.add_get("/", index)
    app.router.add_get("/events", get_events)
    app.router.add_post("/events", post_events)
    app.router.add_get("/clients", list_clients)
    app.router.add_get("/clients/", list_clients)
    app.router.add_get("/clients/{mac}", get_client)
    return app
