"""Dropload embed decoder.

Dropload (dropload.io / dropload.tv) is XFileSharingPro based and ships
its JWPlayer config inside a standard p.a.c.k.e.r block with a variable
base.  The decoded config holds an absolute ``.m3u8`` master, or an
``.mp4`` on older uploads.
"""

from __future__ import annotations

import re

import structlog

from streamhop.domain.entities import EmbedDecodeResult

from ._cookies import extract_cookies
from ._subtitles import extract_tracks
from ._unpacker import unpack_packed_script

log = structlog.get_logger(__name__)

_M3U8_URL_RE = re.compile(r"""https?:[^"'\s]+\.m3u8[^"'\s]*""", re.IGNORECASE)
_MP4_URL_RE = re.compile(r"""https?:[^"'\s]+\.mp4[^"'\s]*""", re.IGNORECASE)

# XFS offline markers
_OFFLINE_MARKERS = (
    "File Not Found",
    "file was removed",
    ">The file expired",
    ">The file was deleted",
    "File is gone",
    "File unavailable",
)


def _first_media_url(decoded: str) -> str:
    normalized = decoded.replace("\\/", "/")
    match = _M3U8_URL_RE.search(normalized) or _MP4_URL_RE.search(normalized)
    return match.group(0) if match else ""


def decode(html: str, origin: str) -> EmbedDecodeResult:
    """Decode a Dropload embed page.

    Tracks are resolved against *origin*; media URLs must already be
    absolute in the decoded config.
    """
    decoded = unpack_packed_script(html)
    cookies = extract_cookies(f"{html}\n{decoded}" if decoded else html)
    if not decoded:
        for marker in _OFFLINE_MARKERS:
            if marker in html:
                log.info("dropload_file_offline", origin=origin, marker=marker)
                break
        else:
            log.debug("dropload_packer_not_found", origin=origin)
        return EmbedDecodeResult(cookies=cookies)

    stream_url = _first_media_url(decoded)
    if not stream_url:
        log.debug("dropload_media_url_not_found", origin=origin, decoded_len=len(decoded))

    return EmbedDecodeResult(
        stream_url=stream_url,
        subtitles=tuple(extract_tracks(decoded, origin)),
        cookies=cookies,
    )
