"""Port implemented by every content-provider adapter."""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from streamhop.domain.entities import ContentType, Link, Stream


@runtime_checkable
class StreamProviderPort(Protocol):
    """Turns catalog links into playable streams for one site.

    Implementations never raise from these methods: every failure is
    logged and reported as an empty list.
    """

    name: str

    async def get_streams(
        self,
        link: str,
        content_type: ContentType = "movie",
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[Stream]: ...

    async def get_episode_links(self, url: str) -> list[Link]: ...
