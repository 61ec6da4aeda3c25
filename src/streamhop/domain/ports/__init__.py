from .base_url import BaseUrlResolverPort
from .cache import CachePort
from .fallback_extractor import FallbackExtractorPort
from .stream_provider import StreamProviderPort

__all__ = [
    "BaseUrlResolverPort",
    "CachePort",
    "FallbackExtractorPort",
    "StreamProviderPort",
]
