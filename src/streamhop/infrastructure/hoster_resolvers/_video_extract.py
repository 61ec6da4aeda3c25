"""Best-effort video URL scan for embed pages the host decoders missed.

Used as the last resort for SuperVideo-family embeds, whose player markup
changes more often than the packer itself.
"""

from __future__ import annotations

import re

import structlog

from ._unpacker import find_packed_script, unpack

log = structlog.get_logger(__name__)

_HLS2_RE = re.compile(r'"hls2"\s*:\s*"(https?://[^"]+)"')
_SOURCES_FILE_RE = re.compile(
    r"""sources\s*:\s*\[\s*\{[^}]*file\s*:\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)""",
)
_FILE_RE = re.compile(r"""(?:source|file|src)\s*[:=]\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)""")
_SOURCE_TAG_RE = re.compile(r"""<source[^>]+src\s*=\s*["'](https?://[^"']+)""")
_VIDEO_TAG_RE = re.compile(r"""<video[^>]+src\s*=\s*["'](https?://[^"']+)""")
_QUOTED_HLS_RE = re.compile(r"""["'](https?://[^"']+\.m3u8[^"']*)["']""")


def _is_artifact(url: str) -> bool:
    lowered = url.lower()
    return "thumbnail" in lowered or "track" in lowered


def extract_from_unpacked(js: str) -> str | None:
    """Find a JWPlayer media URL in unpacked JavaScript."""
    normalized = js.replace("\\'", "'").replace('\\"', '"').replace("\\/", "/")
    for pattern in (_SOURCES_FILE_RE, _FILE_RE):
        m = pattern.search(normalized)
        if m:
            return m.group(1)
    return None


def extract_video_url(html: str) -> str | None:
    """Extract a playable video URL from embed page HTML.

    Tries in order:
    1. ``"hls2":"http..."`` player config
    2. packed JavaScript blocks (any base)
    3. JWPlayer ``sources``/``file`` entries in the page itself
    4. HTML5 ``<source>``/``<video>`` tags
    5. any quoted HLS URL
    """
    if not html:
        return None

    m = _HLS2_RE.search(html)
    if m:
        return m.group(1)

    packed = find_packed_script(html)
    if packed is not None:
        unpacked = unpack(packed.payload, packed.base, packed.count, packed.dictionary)
        url = extract_from_unpacked(unpacked) if unpacked else None
        if url:
            return url

    for pattern in (_SOURCES_FILE_RE, _FILE_RE, _SOURCE_TAG_RE, _VIDEO_TAG_RE, _QUOTED_HLS_RE):
        m = pattern.search(html)
        if m and not _is_artifact(m.group(1)):
            return m.group(1)

    return None


class PageScanExtractor:
    """Fallback extractor backed by :func:`extract_video_url`."""

    async def extract(self, html: str) -> str:
        url = extract_video_url(html) or ""
        if url:
            log.debug("page_scan_extracted", url=url)
        return url
