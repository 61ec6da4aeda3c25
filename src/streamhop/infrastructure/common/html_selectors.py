"""CSS-selector helpers over BeautifulSoup.

Selector functions accept a primary selector plus *fallback_selectors*;
the first selector with at least one match wins.  Provider pages move
attributes between wrapper elements often enough that every lookup
gets a fallback chain.
"""

from __future__ import annotations

from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse *html* with the ``lxml`` parser."""
    return BeautifulSoup(html or "", "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """All elements of the first selector that matches anything."""
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def attr_value(element: Tag, attr: str, default: str = "") -> str:
    """Attribute as a stripped string (multi-valued attributes joined)."""
    val = element.get(attr)
    if isinstance(val, list):
        val = " ".join(val)
    return str(val).strip() if val else default


def extract_attr(
    root: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """*attr* of the first matching element that actually carries it."""
    for sel in (selector, *fallback_selectors):
        for match in root.select(sel):
            val = attr_value(match, attr)
            if val:
                return val
    return default


def extract_all_attrs(
    root: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
) -> list[str]:
    """Non-empty *attr* values of every element of the first matching selector."""
    for sel in (selector, *fallback_selectors):
        matches = root.select(sel)
        values = [attr_value(m, attr) for m in matches]
        values = [v for v in values if v]
        if values:
            return values
    return []


def first_attr(element: Tag, attrs: Iterable[str]) -> str:
    """First non-empty attribute of *element* among *attrs*."""
    for attr in attrs:
        val = attr_value(element, attr)
        if val:
            return val
    return ""
