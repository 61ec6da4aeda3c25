"""Dean Edwards p.a.c.k.e.r decoding.

Packed scripts look like::

    eval(function(p,a,c,k,e,d){...}('<payload>',<base>,<count>,'<dict>'.split('|')))

The payload is JavaScript where identifiers were replaced with base-N
index tokens; the dictionary maps each index back to its word.  The
browser decodes by walking the indices from ``count - 1`` down to ``0``
and replacing whole-word tokens one index at a time.  ``unpack`` does the
same, in the same order, so its output matches what the page evaluates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# JS Number.toString(base) digits, extended with A-Z for the packer's base 62.
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Quote-delimited payload and dictionary, each with its own quote style and
# backslash escapes.  Matching is lazy so that two packed blocks on the same
# page are never merged into one.
_PACKED_RE = re.compile(
    r"eval\(\s*function\s*\(\s*p\s*,\s*a\s*,\s*c\s*,\s*k\s*,\s*e\s*,\s*[dr]\s*\)\s*\{"
    r".*?\}\s*\(\s*"
    r"(['\"])((?:\\.|(?!\1)[^\\])*)\1\s*,\s*"
    r"(\d+)\s*,\s*(\d+)\s*,\s*"
    r"(['\"])((?:\\.|(?!\5)[^\\])*)\5\s*\.split\(\s*['\"]\|['\"]\s*\)",
    re.DOTALL,
)

_ESCAPE_RE = re.compile(r"\\(['\"\\])")


@dataclass(frozen=True)
class PackedScript:
    """The four arguments handed to the packer's decode function."""

    payload: str
    base: int
    count: int
    dictionary: list[str]


def to_base(value: int, base: int) -> str:
    """Render *value* in *base* the way the packer's ``e()`` function does."""
    if value < 0 or not 2 <= base <= len(_DIGITS):
        return ""
    if value < base:
        return _DIGITS[value]
    return to_base(value // base, base) + _DIGITS[value % base]


def unescape_js_string(value: str) -> str:
    """Undo ``\\'``, ``\\"`` and ``\\\\`` escapes of a quoted JS literal."""
    return _ESCAPE_RE.sub(r"\1", value)


def unpack(payload: str, base: int, symbol_count: int, dictionary: list[str]) -> str:
    """Substitute whole-word base-N tokens in *payload* with dictionary words.

    Indices are processed from ``symbol_count - 1`` down to ``0``.  Empty
    dictionary entries leave their token untouched.  Returns ``""`` when
    *base* is outside 2..62.
    """
    if not 2 <= base <= len(_DIGITS):
        return ""

    decoded = payload
    for index in range(symbol_count - 1, -1, -1):
        word = dictionary[index] if index < len(dictionary) else ""
        if not word:
            continue
        token = to_base(index, base)
        # Callable replacement: dictionary words may contain backslashes.
        decoded = re.sub(
            rf"\b{re.escape(token)}\b",
            lambda _m, w=word: w,
            decoded,
            flags=re.ASCII,
        )
    return decoded


def find_packed_script(source: str) -> PackedScript | None:
    """Locate the first packer signature in *source* and parse its arguments."""
    if not source:
        return None
    match = _PACKED_RE.search(source)
    if not match:
        return None

    return PackedScript(
        payload=unescape_js_string(match.group(2)),
        base=int(match.group(3)),
        count=int(match.group(4)),
        dictionary=unescape_js_string(match.group(6)).split("|"),
    )


def unpack_packed_script(source: str) -> str:
    """Find and decode a packed script; ``""`` when *source* has none."""
    packed = find_packed_script(source)
    if packed is None:
        return ""
    return unpack(packed.payload, packed.base, packed.count, packed.dictionary)
