"""Shared constants for provider adapters and embed fetching."""

from __future__ import annotations

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# animeunity and its VixCloud player serve a lighter page to iOS Safari.
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Mobile/15E148"
)

BROWSER_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,*/*;q=0.8"
)
DEFAULT_ACCEPT_LANGUAGE = "it-IT,it;q=0.9,en-US;q=0.7,en;q=0.5"

DEFAULT_REQUEST_TIMEOUT = 12.0

# Third-party resolver that maps IMDb ids to embed mirrors.
MOSTRAGUARDA_BASE = "https://mostraguarda.stream"
