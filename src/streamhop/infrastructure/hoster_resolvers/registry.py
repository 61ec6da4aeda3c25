"""Embed host table: host pattern to decoder strategy.

Adding a host means adding one :class:`EmbedHost` row to ``EMBED_HOSTS``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from streamhop.domain.entities import EmbedDecodeResult
from streamhop.infrastructure.common.urls import host_of

from . import dropload, supervideo, vixcloud

Decoder = Callable[[str, str], EmbedDecodeResult]


@dataclass(frozen=True)
class EmbedHost:
    """One embed host family.

    ``label`` prefixes emitted server names ("SuperVideo 1").
    ``use_fallback`` enables the injected fallback extractor when the
    decoder finds nothing.
    """

    label: str
    pattern: re.Pattern[str]
    decode: Decoder
    use_fallback: bool = False

    def matches(self, url: str) -> bool:
        return bool(self.pattern.search(host_of(url) or url))


EMBED_HOSTS: tuple[EmbedHost, ...] = (
    EmbedHost(
        label="SuperVideo",
        pattern=re.compile(r"supervideo", re.IGNORECASE),
        decode=supervideo.decode,
        use_fallback=True,
    ),
    EmbedHost(
        label="Dropload",
        pattern=re.compile(r"dropload\.", re.IGNORECASE),
        decode=dropload.decode,
    ),
    EmbedHost(
        label="VixCloud",
        pattern=re.compile(r"vixcloud\.", re.IGNORECASE),
        decode=vixcloud.decode,
    ),
)


def classify_host(url: str, hosts: Sequence[EmbedHost] = EMBED_HOSTS) -> EmbedHost | None:
    """Return the first host family whose pattern matches *url*'s host."""
    if not url:
        return None
    for host in hosts:
        if host.matches(url):
            return host
    return None
