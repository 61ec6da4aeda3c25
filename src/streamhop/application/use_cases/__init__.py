from .list_episodes import ListEpisodesUseCase
from .resolve_streams import ProviderLookup, ResolveStreamsUseCase

__all__ = [
    "ListEpisodesUseCase",
    "ProviderLookup",
    "ResolveStreamsUseCase",
]
