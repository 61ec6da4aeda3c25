"""SuperVideo embed decoder.

SuperVideo wraps its JWPlayer setup in a packer variant whose decode
function has arbitrary argument names and a ``return p`` tail; the base
is always 36::

    eval(function(p,a,c,k,e,r){...;return p}('<payload>',36,<count>,'<dict>'.split('|')))

The unpacked text carries ``file:"<url>.m3u8..."`` for the HLS master.
"""

from __future__ import annotations

import re

import structlog

from streamhop.domain.entities import EmbedDecodeResult
from streamhop.infrastructure.common.urls import resolve_url

from ._cookies import extract_cookies
from ._subtitles import extract_tracks
from ._unpacker import unescape_js_string, unpack

log = structlog.get_logger(__name__)

SUPERVIDEO_BASE = 36

_EVAL_PACKER_RE = re.compile(
    r"eval\(\s*function\s*\([^)]*\)\s*\{.*?return\s+p\s*;?\s*\}\s*\(\s*"
    r"(['\"])((?:\\.|(?!\1)[^\\])*)\1\s*,\s*"
    rf"{SUPERVIDEO_BASE}\s*,\s*(\d+)\s*,\s*"
    r"(['\"])((?:\\.|(?!\4)[^\\])*)\4\s*\.split\(",
    re.DOTALL,
)

_FILE_M3U8_RE = re.compile(r"""file\s*:\s*(['"])([^'"]+?\.m3u8[^'"]*)\1""")


def unpack_supervideo(html: str) -> str:
    """Decode the base-36 eval packer; ``""`` when the page has none."""
    if not html:
        return ""
    match = _EVAL_PACKER_RE.search(html)
    if not match:
        return ""
    payload = unescape_js_string(match.group(2))
    count = int(match.group(3))
    dictionary = unescape_js_string(match.group(5)).split("|")
    return unpack(payload, SUPERVIDEO_BASE, count, dictionary)


def _extract_file_m3u8(decoded: str, origin: str) -> str:
    normalized = decoded.replace("\\'", "'").replace('\\"', '"').replace("\\/", "/")
    match = _FILE_M3U8_RE.search(normalized)
    if not match:
        return ""
    return resolve_url(match.group(2), origin)


def decode(html: str, origin: str) -> EmbedDecodeResult:
    """Decode a SuperVideo embed page.

    An empty ``stream_url`` means no packed player config (or no HLS
    ``file:`` entry in it) was found.
    """
    decoded = unpack_supervideo(html)
    cookies = extract_cookies(f"{html}\n{decoded}" if decoded else html)
    if not decoded:
        log.debug("supervideo_packer_not_found", origin=origin)
        return EmbedDecodeResult(cookies=cookies)

    stream_url = _extract_file_m3u8(decoded, origin)
    if not stream_url:
        log.debug("supervideo_file_not_found", origin=origin, decoded_len=len(decoded))

    return EmbedDecodeResult(
        stream_url=stream_url,
        subtitles=tuple(extract_tracks(decoded, origin)),
        cookies=cookies,
    )
