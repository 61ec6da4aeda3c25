from __future__ import annotations

import structlog

from streamhop.domain.entities import Link

from .resolve_streams import ProviderLookup

log = structlog.get_logger(__name__)


class ListEpisodesUseCase:
    def __init__(self, *, providers: ProviderLookup) -> None:
        self._providers = providers

    async def execute(self, provider_name: str, url: str) -> list[Link]:
        provider = self._providers.get(provider_name)
        links = await provider.get_episode_links(url)
        log.info(
            "episodes_listed",
            provider=provider_name,
            url=url,
            seasons=len(links),
            episodes=sum(len(link.episodes) for link in links),
        )
        return links
