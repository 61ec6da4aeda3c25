"""Domain entities for stream resolution.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal
from urllib.parse import urlsplit

StreamType = Literal["m3u8", "mp4"]
ContentType = Literal["movie", "series"]
SubtitleMime = Literal["text/vtt", "application/x-subrip", "application/ttml+xml"]

# Separator between a title reference and an episode key in a catalog link.
EPISODE_SEPARATOR = "::"


@dataclass(frozen=True)
class CatalogLink:
    """A title reference, optionally narrowed to one episode.

    Parsed from ``<titleRef>`` or ``<titleRef>::<episodeKey>``.
    """

    title_ref: str
    episode_key: str | None = None

    @property
    def is_episode(self) -> bool:
        return self.episode_key is not None

    def __str__(self) -> str:
        if self.episode_key is None:
            return self.title_ref
        return f"{self.title_ref}{EPISODE_SEPARATOR}{self.episode_key}"


def parse_catalog_link(link: str) -> CatalogLink:
    """Split a catalog link on the first ``::``.

    An empty episode part (``"title::"``) is kept as ``""`` so callers can
    tell "episode requested but missing" apart from a bare title.
    """
    raw = (link or "").strip()
    if EPISODE_SEPARATOR not in raw:
        return CatalogLink(title_ref=raw)
    title_ref, episode_key = raw.split(EPISODE_SEPARATOR, 1)
    return CatalogLink(title_ref=title_ref.strip(), episode_key=episode_key.strip())


@dataclass(frozen=True)
class TextTrack:
    """A subtitle track attached to a stream."""

    title: str
    language: str  # ISO 639-1 where known, "und" when undetermined
    type: SubtitleMime
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "language": self.language,
            "type": self.type,
            "uri": self.uri,
        }


@dataclass(frozen=True)
class Stream:
    """A directly playable media URL produced by the resolution pipeline."""

    server: str  # "SuperVideo 1", "Dropload 2", ...
    link: str  # Absolute playable URL
    type: StreamType
    subtitles: tuple[TextTrack, ...] = ()
    headers: dict[str, str] = field(default_factory=dict)  # Required request headers

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "server": self.server,
            "link": self.link,
            "type": self.type,
        }
        if self.subtitles:
            out["subtitles"] = [track.to_dict() for track in self.subtitles]
        if self.headers:
            out["headers"] = dict(self.headers)
        return out


@dataclass(frozen=True)
class EmbedDecodeResult:
    """Outcome of decoding one embed page.

    ``stream_url == ""`` means the page had nothing to extract.
    ``alternate_urls`` lists further servers for the same media, in page
    order; they share subtitles, cookies and type with ``stream_url``.
    ``stream_type`` is set only by decoders whose page format fixes the
    media type (playlist endpoints without a file suffix); otherwise the
    type is inferred from the URL.
    """

    stream_url: str = ""
    subtitles: tuple[TextTrack, ...] = ()
    cookies: dict[str, str] = field(default_factory=dict)
    stream_type: StreamType | None = None
    alternate_urls: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return bool(self.stream_url)

    @property
    def stream_urls(self) -> tuple[str, ...]:
        """Primary URL first, then the alternates; empty when nothing was found."""
        if not self.stream_url:
            return ()
        return (self.stream_url, *self.alternate_urls)


@dataclass(frozen=True)
class EpisodeLink:
    """One episode entry, resolvable later via its catalog ``link``."""

    title: str
    link: str
    season: int | None = None
    episode: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"title": self.title, "link": self.link}
        if self.season is not None:
            out["season"] = self.season
        if self.episode is not None:
            out["episode"] = self.episode
        return out


@dataclass(frozen=True)
class Link:
    """A group of episodes (usually one season)."""

    title: str
    episodes: tuple[EpisodeLink, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "episodes": [episode.to_dict() for episode in self.episodes],
        }


def infer_stream_type(url: str) -> StreamType | None:
    """Infer the media type from the URL path suffix.

    ``.m3u8`` wins over ``.mp4``; anything else is ``None``.
    """
    path = urlsplit(url).path.lower() if url else ""
    if ".m3u8" in path:
        return "m3u8"
    if ".mp4" in path:
        return "mp4"
    return None
