"""URL normalisation helpers shared by decoders, providers and the assembler."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlsplit

_ABSOLUTE_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_absolute(url: str) -> bool:
    """True for ``http://`` / ``https://`` URLs with a host."""
    return bool(url) and bool(_ABSOLUTE_RE.match(url)) and bool(urlsplit(url).netloc)


def strip_trailing_slashes(value: str) -> str:
    return value.rstrip("/")


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of *url*, or ``""`` if it has none."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}"


def resolve_url(href: str, base_url: str) -> str:
    """Resolve *href* against *base_url*.

    Absolute URLs pass through, protocol-relative ones get ``https:``.
    Returns ``""`` for empty input or when the result is not absolute.
    """
    href = (href or "").strip()
    if not href:
        return ""
    if href.startswith("//"):
        return f"https:{href}"
    if _ABSOLUTE_RE.match(href):
        return href
    if not base_url:
        return ""
    try:
        joined = urljoin(base_url, href)
    except ValueError:
        return ""
    return joined if is_absolute(joined) else ""


def host_of(url: str) -> str:
    """Lower-cased hostname of *url* (``""`` when unparsable)."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""
