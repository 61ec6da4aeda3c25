"""Provider listing, stream resolution and episode listing endpoints.

Unknown providers surface as ProviderNotFoundError and are turned into a
404 by the app-level handler in main.py.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import Any, Literal, cast

import structlog
from fastapi import APIRouter, Query, Request

from streamhop.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["streams"])

_DISCONNECT_POLL_SECONDS = 0.5


async def _watch_disconnect(request: Request, cancel: asyncio.Event) -> None:
    while not cancel.is_set():
        if await request.is_disconnected():
            log.info("client_disconnected", path=request.url.path)
            cancel.set()
            return
        await asyncio.sleep(_DISCONNECT_POLL_SECONDS)


@router.get("/providers")
async def list_providers(request: Request) -> dict[str, list[str]]:
    state = cast(AppState, request.app.state)
    return {"providers": state.providers.list_names()}


@router.get("/{provider}/streams")
async def get_streams(
    request: Request,
    provider: str,
    link: str = Query(..., min_length=1, description="Catalog link, optionally '<title>::<episode>'."),
    type: Literal["movie", "series"] = Query(default="movie"),  # noqa: A002
) -> dict[str, Any]:
    """Resolve a catalog link into playable streams.

    Resolution stops (and returns nothing) when the client disconnects.
    """
    state = cast(AppState, request.app.state)
    cancel = asyncio.Event()
    watcher = asyncio.create_task(_watch_disconnect(request, cancel))
    try:
        streams = await state.resolve_streams_uc.execute(provider, link, type, cancel=cancel)
    finally:
        cancel.set()
        watcher.cancel()
        with suppress(asyncio.CancelledError):
            await watcher

    return {"streams": [stream.to_dict() for stream in streams]}


@router.get("/{provider}/episodes")
async def get_episodes(
    request: Request,
    provider: str,
    url: str = Query(..., min_length=1, description="Title page URL or provider id."),
) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    links = await state.list_episodes_uc.execute(provider, url)
    return {"links": [link.to_dict() for link in links]}
