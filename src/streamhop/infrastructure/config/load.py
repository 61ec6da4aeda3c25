from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import PROVIDER_NAMES, AppConfig, EnvOverrides

_SECTION_KEYS: set[str] = {"http", "logging", "cache", "base_url", "providers"}

# Flat keys (ENV / CLI) -> (section, key)
_FLAT_MAP: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_backend": ("cache", "backend"),
    "cache_dir": ("cache", "dir"),
    "cache_ttl_seconds": ("cache", "ttl_seconds"),
    "base_url_pointer_url": ("base_url", "pointer_url"),
    "base_url_providers_json_url": ("base_url", "providers_json_url"),
    "base_url_ttl_seconds": ("base_url", "ttl_seconds"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into *base* (dict + dict merges, else override wins)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize one layer (defaults/YAML/ENV/CLI) into the sectioned shape.

    Sectioned blocks pass through; flat keys such as ``log_level`` or
    ``streamingunity_base_url`` are moved into their section.
    """
    out: dict[str, Any] = {}

    for section in _SECTION_KEYS:
        if section in data and isinstance(data[section], Mapping):
            out[section] = deepcopy(dict(data[section]))

    for key in ("app_name", "environment"):
        if key in data:
            out[key] = data[key]

    for flat_key, (section, section_key) in _FLAT_MAP.items():
        if flat_key in data:
            out.setdefault(section, {})[section_key] = data[flat_key]

    for provider in PROVIDER_NAMES:
        flat_key = f"{provider}_base_url"
        if flat_key in data:
            providers = out.setdefault("providers", {})
            providers.setdefault(provider, {})["base_url"] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars < cli overrides

    Never creates files or directories.
    """
    cli_overrides = cli_overrides or {}

    # .env participates as part of the env layer
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged = _normalize_layer(deepcopy(DEFAULT_CONFIG))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        _deep_merge(merged, _normalize_layer(_read_yaml_config(config_path)))

    _deep_merge(merged, _normalize_layer(EnvOverrides().to_update_dict()))
    _deep_merge(merged, _normalize_layer(cli_overrides))

    return AppConfig.model_validate(merged)
