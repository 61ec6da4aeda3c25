from .html_selectors import (
    attr_value,
    extract_all_attrs,
    extract_attr,
    first_attr,
    parse_html,
    select_items,
)
from .urls import host_of, is_absolute, origin_of, resolve_url, strip_trailing_slashes

__all__ = [
    "attr_value",
    "extract_all_attrs",
    "extract_attr",
    "first_attr",
    "host_of",
    "is_absolute",
    "origin_of",
    "parse_html",
    "resolve_url",
    "select_items",
    "strip_trailing_slashes",
]
