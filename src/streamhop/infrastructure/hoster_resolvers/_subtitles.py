"""Subtitle track extraction from decoded JWPlayer configs.

Accepted shape (the only one the embed hosts currently emit)::

    tracks: [
        {file: "https://cdn.example/sub_ita.vtt", label: "Italian", kind: "captions"},
        {file: "/thumbs/abc.vtt", kind: "thumbnails"}
    ]

- the ``tracks`` key may be quoted; ``audioTracks`` and similar keys are skipped
- entries are flat object literals; keys bare or quoted, in any order
- values are single- or double-quoted strings

This is a regex scanner, not a JS parser.  When the hosts change their
player config, this is where extraction breaks first.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from streamhop.domain.entities import SubtitleMime, TextTrack
from streamhop.infrastructure.common.urls import resolve_url

_TRACKS_BLOCK_RE = re.compile(
    r"""(?:['"]tracks['"]|(?<![\w$])tracks)\s*:\s*\[(.*?)\]""",
    re.DOTALL | re.IGNORECASE,
)
_ENTRY_RE = re.compile(r"\{([^{}]*)\}", re.DOTALL)
_FIELD_RE = re.compile(
    r"""['"]?([A-Za-z_]\w*)['"]?\s*:\s*(['"])(.*?)\2""",
    re.DOTALL,
)
_VTT_URL_RE = re.compile(r"""https?://[^\s"'<>\\]+?\.vtt(?:\?[^\s"'<>\\]*)?""", re.IGNORECASE)
_SUFFIX_LANG_RE = re.compile(r"[_.\-]([a-z]{3})\.(?:vtt|srt|ttml)$", re.IGNORECASE)

# Language names as they appear in player labels (English and Italian).
LABEL_LANGUAGES: dict[str, str] = {
    "italian": "it",
    "italiano": "it",
    "english": "en",
    "inglese": "en",
    "spanish": "es",
    "español": "es",
    "spagnolo": "es",
    "french": "fr",
    "français": "fr",
    "francese": "fr",
    "german": "de",
    "deutsch": "de",
    "tedesco": "de",
    "portuguese": "pt",
    "portoghese": "pt",
    "japanese": "ja",
    "giapponese": "ja",
    "russian": "ru",
    "russo": "ru",
    "arabic": "ar",
    "arabo": "ar",
    "chinese": "zh",
    "cinese": "zh",
    "korean": "ko",
    "coreano": "ko",
    "dutch": "nl",
    "olandese": "nl",
    "polish": "pl",
    "polacco": "pl",
    "turkish": "tr",
    "turco": "tr",
}

# ISO 639-2 filename suffixes (``movie_ita.vtt``).
SUFFIX_LANGUAGES: dict[str, str] = {
    "ita": "it",
    "eng": "en",
    "spa": "es",
    "esp": "es",
    "fre": "fr",
    "fra": "fr",
    "ger": "de",
    "deu": "de",
    "por": "pt",
    "jpn": "ja",
    "rus": "ru",
    "ara": "ar",
    "chi": "zh",
    "zho": "zh",
    "kor": "ko",
    "dut": "nl",
    "nld": "nl",
    "pol": "pl",
    "tur": "tr",
}

UNDETERMINED = "und"


def _normalize_js(text: str) -> str:
    return text.replace("\\'", "'").replace('\\"', '"').replace("\\/", "/")


def subtitle_mime(uri: str) -> SubtitleMime:
    path = urlsplit(uri).path.lower()
    if path.endswith(".srt"):
        return "application/x-subrip"
    if path.endswith(".ttml"):
        return "application/ttml+xml"
    return "text/vtt"


def language_from_label(label: str) -> str | None:
    normalized = label.strip().lower()
    if not normalized:
        return None
    if normalized in LABEL_LANGUAGES:
        return LABEL_LANGUAGES[normalized]
    # "Italian (forced)", "English - SDH"
    first_word = re.split(r"[\s(\[\-_,/]+", normalized, maxsplit=1)[0]
    return LABEL_LANGUAGES.get(first_word)


def language_from_filename(uri: str) -> str | None:
    match = _SUFFIX_LANG_RE.search(urlsplit(uri).path)
    if not match:
        return None
    return SUFFIX_LANGUAGES.get(match.group(1).lower())


def resolve_language(label: str, uri: str) -> str:
    """Label table first, then filename suffix, then raw label, then ``und``."""
    return (
        language_from_label(label)
        or language_from_filename(uri)
        or label.strip().lower()
        or UNDETERMINED
    )


def _parse_entry(body: str) -> dict[str, str]:
    return {m.group(1).lower(): m.group(3).strip() for m in _FIELD_RE.finditer(body)}


def _caption_tracks(block: str, base_url: str) -> list[TextTrack]:
    tracks: list[TextTrack] = []
    for entry in _ENTRY_RE.finditer(block):
        fields = _parse_entry(entry.group(1))
        file_ = fields.get("file", "")
        kind = fields.get("kind")
        label = fields.get("label", fields.get("title"))
        if not file_ or kind is None or label is None:
            continue
        if kind.lower() != "captions":
            continue
        uri = resolve_url(file_, base_url)
        if not uri:
            continue
        tracks.append(
            TextTrack(
                title=label or uri,
                language=resolve_language(label, uri),
                type=subtitle_mime(uri),
                uri=uri,
            )
        )
    return tracks


def _loose_vtt_tracks(text: str, base_url: str) -> list[TextTrack]:
    tracks: list[TextTrack] = []
    seen: set[str] = set()
    for m in _VTT_URL_RE.finditer(text):
        uri = resolve_url(m.group(0), base_url)
        if not uri or uri in seen:
            continue
        if "thumbnail" in uri.lower() or "sprite" in uri.lower():
            continue
        seen.add(uri)
        tracks.append(
            TextTrack(
                title=uri,
                language=resolve_language("", uri),
                type=subtitle_mime(uri),
                uri=uri,
            )
        )
    return tracks


def extract_tracks(decoded: str, base_url: str = "") -> list[TextTrack]:
    """Extract caption tracks from decoded player JavaScript.

    Falls back to a loose ``.vtt`` URL scan only when no caption entry is
    found.  Output order follows source order.
    """
    if not decoded:
        return []

    text = _normalize_js(decoded)
    block_match = _TRACKS_BLOCK_RE.search(text)
    block = block_match.group(1) if block_match else ""

    tracks = _caption_tracks(block, base_url) if block else []
    if tracks:
        return tracks

    return _loose_vtt_tracks(block or text, base_url)
