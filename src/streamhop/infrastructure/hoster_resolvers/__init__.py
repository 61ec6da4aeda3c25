"""Embed page decoders and the stream assembler."""

from __future__ import annotations

from ._video_extract import PageScanExtractor
from .assembler import StreamAssembler, normalize_candidate
from .registry import EMBED_HOSTS, EmbedHost, classify_host

__all__ = [
    "EMBED_HOSTS",
    "EmbedHost",
    "PageScanExtractor",
    "StreamAssembler",
    "classify_host",
    "normalize_candidate",
]
