"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamhop.infrastructure.base_url import (
    DEFAULT_POINTER_URL,
    DEFAULT_PROVIDERS_JSON_URL,
    DEFAULT_TTL_SECONDS,
)

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["diskcache", "memory"]

PROVIDER_NAMES = ("altadefinizionez", "streamingunity", "animeunity")


def _normalize_path(value: Any) -> Path:
    """Normalize a path-like value; never touches the filesystem."""
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class ProviderConfig(BaseModel):
    """Per-provider settings (YAML section: ``providers.<name>``)."""

    enabled: bool = True
    base_url: str = Field(
        default="",
        description="Pin the site's domain; empty = live lookup, then built-in default.",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_slashes(cls, v: str) -> str:
        return v.strip().rstrip("/")


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    YAML is sectioned (http/logging/cache/base_url/providers); environment
    variables come in through EnvOverrides so load.py controls precedence
    (defaults < YAML < ENV < CLI).
    """

    app_name: str = Field(default="streamhop", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request timeout. Unset = each provider's own default.",
    )
    http_user_agent: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Browser User-Agent override (desktop providers only).",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices("log_level", AliasPath("logging", "level")),
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices("log_format", AliasPath("logging", "format")),
        description="console/json. If unset, derived from environment.",
    )

    # Cache (YAML section: cache.*)
    cache_backend: CacheBackendName = Field(
        default="diskcache",
        validation_alias=AliasChoices("cache_backend", AliasPath("cache", "backend")),
    )
    cache_dir: Path = Field(
        default=Path("./.cache/streamhop"),
        validation_alias=AliasChoices("cache_dir", AliasPath("cache", "dir")),
    )
    cache_ttl_seconds: int = Field(
        default=3600,
        validation_alias=AliasChoices("cache_ttl_seconds", AliasPath("cache", "ttl_seconds")),
    )

    # Base-URL lookup (YAML section: base_url.*)
    base_url_pointer_url: str = Field(
        default=DEFAULT_POINTER_URL,
        validation_alias=AliasChoices(
            "base_url_pointer_url",
            AliasPath("base_url", "pointer_url"),
        ),
    )
    base_url_providers_json_url: str = Field(
        default=DEFAULT_PROVIDERS_JSON_URL,
        validation_alias=AliasChoices(
            "base_url_providers_json_url",
            AliasPath("base_url", "providers_json_url"),
        ),
    )
    base_url_ttl_seconds: int = Field(
        default=DEFAULT_TTL_SECONDS,
        validation_alias=AliasChoices(
            "base_url_ttl_seconds",
            AliasPath("base_url", "ttl_seconds"),
        ),
    )

    providers: dict[str, ProviderConfig] = Field(default_factory=dict)

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("cache_ttl_seconds", "base_url_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("ttl must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # console in dev/test, json in prod
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def provider(self, name: str) -> ProviderConfig:
        return self.providers.get(name) or ProviderConfig()

    def base_url_overrides(self) -> dict[str, str]:
        return {name: cfg.base_url for name, cfg in self.providers.items() if cfg.base_url}

    def to_sectioned_dict(self) -> dict[str, Any]:
        """Dump configuration in the sectioned shape used by config.yaml."""
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "backend": self.cache_backend,
                "dir": str(self.cache_dir),
                "ttl_seconds": self.cache_ttl_seconds,
            },
            "base_url": {
                "pointer_url": self.base_url_pointer_url,
                "providers_json_url": self.base_url_providers_json_url,
                "ttl_seconds": self.base_url_ttl_seconds,
            },
            "providers": {name: cfg.model_dump() for name, cfg in self.providers.items()},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Examples:
    - STREAMHOP_ENVIRONMENT=prod
    - STREAMHOP_HTTP_TIMEOUT_SECONDS=8
    - STREAMHOP_LOG_LEVEL=DEBUG
    - STREAMHOP_CACHE_BACKEND=memory
    - STREAMHOP_STREAMINGUNITY_BASE_URL=https://streamingunity.example
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMHOP_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_ttl_seconds: Optional[int] = None

    base_url_pointer_url: Optional[str] = None
    base_url_providers_json_url: Optional[str] = None
    base_url_ttl_seconds: Optional[int] = None

    altadefinizionez_base_url: Optional[str] = None
    streamingunity_base_url: Optional[str] = None
    animeunity_base_url: Optional[str] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """Only the values that were actually provided, for merging."""
        return self.model_dump(exclude_none=True)
