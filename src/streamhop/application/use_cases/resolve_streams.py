from __future__ import annotations

import asyncio
from typing import Protocol

import structlog

from streamhop.domain.entities import ContentType, Stream
from streamhop.domain.ports import StreamProviderPort

log = structlog.get_logger(__name__)


class ProviderLookup(Protocol):
    def get(self, name: str) -> StreamProviderPort: ...


class ResolveStreamsUseCase:
    """Catalog link -> playable streams for one provider.

    Raises ``ProviderNotFoundError`` for an unknown provider name; content
    gaps and transport failures come back as an empty list.
    """

    def __init__(self, *, providers: ProviderLookup) -> None:
        self._providers = providers

    async def execute(
        self,
        provider_name: str,
        link: str,
        content_type: ContentType = "movie",
        *,
        cancel: asyncio.Event | None = None,
    ) -> list[Stream]:
        provider = self._providers.get(provider_name)
        streams = await provider.get_streams(link, content_type, cancel=cancel)
        log.info(
            "streams_resolved",
            provider=provider_name,
            link=link,
            content_type=content_type,
            count=len(streams),
        )
        return streams
