from .streams import (
    EPISODE_SEPARATOR,
    CatalogLink,
    ContentType,
    EmbedDecodeResult,
    EpisodeLink,
    Link,
    Stream,
    StreamType,
    SubtitleMime,
    TextTrack,
    infer_stream_type,
    parse_catalog_link,
)

__all__ = [
    "EPISODE_SEPARATOR",
    "CatalogLink",
    "ContentType",
    "EmbedDecodeResult",
    "EpisodeLink",
    "Link",
    "Stream",
    "StreamType",
    "SubtitleMime",
    "TextTrack",
    "infer_stream_type",
    "parse_catalog_link",
]
