"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from streamhop.infrastructure.base_url import (
    DEFAULT_POINTER_URL,
    DEFAULT_PROVIDERS_JSON_URL,
    DEFAULT_TTL_SECONDS,
)

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamhop",
    "environment": "dev",
    "http": {
        "timeout_seconds": None,  # provider defaults (10-15 s)
        "user_agent": None,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "diskcache",
        "dir": "./.cache/streamhop",
        "ttl_seconds": 3600,
    },
    "base_url": {
        "pointer_url": DEFAULT_POINTER_URL,
        "providers_json_url": DEFAULT_PROVIDERS_JSON_URL,
        "ttl_seconds": DEFAULT_TTL_SECONDS,
    },
    "providers": {
        "altadefinizionez": {"enabled": True, "base_url": ""},
        "streamingunity": {"enabled": True, "base_url": ""},
        "animeunity": {"enabled": True, "base_url": ""},
    },
}
