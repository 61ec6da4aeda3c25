"""VixCloud player page decoder.

The player page (``vixcloud.co/embed/<id>``) assigns its playback state
to globals instead of packing it::

    window.streams = [{"name":"Server1","active":true,"url":"https:\\/\\/vixcloud.co\\/playlist\\/1?b=1"}];
    window.masterPlaylist = {
        params: {'token': 'abc', 'expires': '1700000000', 'asn': ''},
        url: 'https://vixcloud.co/playlist/1?b=1',
    }
    window.canPlayFHD = true

The master playlist is the primary stream; every ``window.streams`` entry
becomes an alternate server.  Playlist endpoints are HLS even though
their path has no ``.m3u8``.
"""

from __future__ import annotations

import json
import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import structlog

from streamhop.domain.entities import EmbedDecodeResult, StreamType
from streamhop.infrastructure.common.urls import is_absolute

from ._cookies import extract_cookies
from ._subtitles import extract_tracks

log = structlog.get_logger(__name__)

# Object body, allowing one level of nested braces for ``params: {...}``.
_MASTER_PLAYLIST_RE = re.compile(
    r"window\.masterPlaylist\s*=\s*\{((?:[^{}]|\{[^{}]*\})*)\}",
    re.DOTALL,
)
_STREAMS_RE = re.compile(r"window\.streams\s*=\s*(\[.*?\])\s*;", re.DOTALL)
_DOWNLOAD_URL_RE = re.compile(r"""window\.downloadUrl\s*=\s*(['"])(.+?)\1""")
_CAN_PLAY_FHD_RE = re.compile(r"window\.canPlayFHD\s*=\s*true")
_MEDIA_URL_RE = re.compile(r"""https?://[^\s"'<>]+?\.(?:m3u8|mp4)[^\s"'<>]*""", re.IGNORECASE)

_PARAM_NAMES = ("token", "expires", "asn")


def _key_re(name: str, value: str) -> re.Pattern[str]:
    """``name: <value>`` where *name* is quoted or stands alone as an identifier."""
    return re.compile(
        rf"""(?:['"]{name}['"]|(?<![\w$]){name}(?![\w$]))\s*:\s*{value}""",
        re.DOTALL,
    )


_URL_KEY_RE = _key_re("url", r"""(['"])(.+?)\1""")
_PARAMS_BLOCK_RE = _key_re("params", r"\{([^{}]*)\}")


def _param(text: str, name: str) -> str | None:
    match = _key_re(name, r"""(['"])(.*?)\1""").search(text)
    return match.group(2) if match else None


def with_query(url: str, params: dict[str, str]) -> str:
    """Append *params* to *url*, replacing keys it already carries."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


def _master_body(html: str) -> str | None:
    match = _MASTER_PLAYLIST_RE.search(html)
    return match.group(1) if match else None


def _params_scope(html: str) -> str:
    """Text holding the playlist params: the master ``params`` block when present."""
    body = _master_body(html)
    if body is not None:
        block = _PARAMS_BLOCK_RE.search(body)
        if block:
            return block.group(1)
    return html


def _playlist_params(html: str, *, skip_empty: bool) -> dict[str, str]:
    scope = _params_scope(html)
    params: dict[str, str] = {}
    for name in _PARAM_NAMES:
        value = _param(scope, name)
        if value is None or (skip_empty and not value):
            continue
        params[name] = value
    return params


def _from_master_playlist(html: str) -> str:
    body = _master_body(html)
    if body is None:
        return ""
    # The nested params block never carries the playlist url.
    match = _URL_KEY_RE.search(_PARAMS_BLOCK_RE.sub("", body))
    if not match:
        return ""
    url = match.group(2).replace("\\/", "/")
    if not is_absolute(url):
        return ""
    params = _playlist_params(html, skip_empty=False)
    if _CAN_PLAY_FHD_RE.search(html):
        params["h"] = "1"
    return with_query(url, params)


def _from_streams_list(html: str) -> list[str]:
    """Every server entry as a playlist URL, the active one first."""
    match = _STREAMS_RE.search(html)
    if not match:
        return []
    try:
        streams = json.loads(match.group(1))
    except ValueError:
        log.debug("vixcloud_streams_json_invalid")
        return []
    if not isinstance(streams, list):
        return []

    entries = [s for s in streams if isinstance(s, dict) and is_absolute(str(s.get("url", "")))]
    entries.sort(key=lambda s: not s.get("active"))
    params = _playlist_params(html, skip_empty=True)
    return [with_query(str(s["url"]), params) for s in entries]


def extract_download_url(html: str) -> str:
    """``window.downloadUrl``, else the first absolute ``.m3u8``/``.mp4`` URL on the page."""
    match = _DOWNLOAD_URL_RE.search(html)
    if match and is_absolute(match.group(2)):
        return match.group(2)
    match = _MEDIA_URL_RE.search(html)
    return match.group(0) if match else ""


def download_stream_type(url: str) -> StreamType:
    return "m3u8" if ".m3u8" in url.lower() else "mp4"


def decode(html: str, origin: str) -> EmbedDecodeResult:
    """Decode a VixCloud player page into its HLS playlists."""
    if not html:
        return EmbedDecodeResult()

    cookies = extract_cookies(html)
    subtitles = tuple(extract_tracks(html, origin))

    servers = _from_streams_list(html)
    playlist = _from_master_playlist(html) or (servers[0] if servers else "")
    if playlist:
        return EmbedDecodeResult(
            stream_url=playlist,
            subtitles=subtitles,
            cookies=cookies,
            stream_type="m3u8",
            alternate_urls=tuple(url for url in servers if url != playlist),
        )

    download = extract_download_url(html)
    if not download:
        log.debug("vixcloud_playlist_not_found", origin=origin)
        return EmbedDecodeResult(cookies=cookies)

    return EmbedDecodeResult(
        stream_url=download,
        subtitles=subtitles,
        cookies=cookies,
        stream_type=download_stream_type(download),
    )
