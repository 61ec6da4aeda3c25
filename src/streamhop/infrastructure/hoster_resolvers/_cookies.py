"""Session cookie harvesting from embed page scripts.

Some hosts only serve the media playlist to clients that replay the
cookies the player page sets from JavaScript.  Two call conventions are
recognised::

    $.cookie('file_id', '4821', { expires: 10 });
    document.cookie = "aff=12; path=/";
"""

from __future__ import annotations

import re
from collections.abc import Mapping

_JQUERY_COOKIE_RE = re.compile(
    r"""\$\.cookie\(\s*(['"])([^'"]+)\1\s*,\s*(['"])([^'"]*)\3""",
)

_DOCUMENT_COOKIE_RE = re.compile(
    r"""document\.cookie\s*=\s*(['"])\s*([^=;'"\s]+)\s*=\s*([^;'"]*)""",
)


def extract_cookies(html: str) -> dict[str, str]:
    """Collect cookie name/value pairs set by page scripts.

    jQuery calls are applied first, then ``document.cookie`` assignments;
    a later match for the same name overwrites an earlier one.
    """
    cookies: dict[str, str] = {}
    if not html:
        return cookies

    for m in _JQUERY_COOKIE_RE.finditer(html):
        cookies[m.group(2).strip()] = m.group(4)

    for m in _DOCUMENT_COOKIE_RE.finditer(html):
        cookies[m.group(2)] = m.group(3).strip()

    return cookies


def build_cookie_header(cookies: Mapping[str, str | None]) -> str:
    """Join cookies into a ``Cookie`` header value.

    Returns ``""`` when nothing usable remains, so callers can omit the
    header instead of sending an empty one.
    """
    return "; ".join(
        f"{name}={value}"
        for name, value in cookies.items()
        if name and value is not None
    )
