"""Typed view of ``app.state`` for the HTTP API."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streamhop.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streamhop.application.use_cases import ListEpisodesUseCase, ResolveStreamsUseCase
    from streamhop.domain.ports import BaseUrlResolverPort, CachePort
    from streamhop.infrastructure.providers.registry import ProviderRegistry


class AppState(State):
    """``config`` is set by build_app(); everything else by lifespan()."""

    config: AppConfig

    cache: CachePort
    http_client: httpx.AsyncClient
    base_url_resolver: BaseUrlResolverPort
    providers: ProviderRegistry

    resolve_streams_uc: ResolveStreamsUseCase
    list_episodes_uc: ListEpisodesUseCase
