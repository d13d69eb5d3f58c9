# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Used only when JWT_SECRET is not configured outside production.
DEFAULT_JWT_SECRET = "housing-app-jwt-secret-vancouver-2026"

SESSION_LIFETIME_SECONDS = 60 * 60 * 24 * 7


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class _Section(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class DatabaseConfig(_Section):
    url: str = Field("sqlite:///nestfinder.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")


class StorageConfig(_Section):
    directory: Path = Field(Path("instance/uploads"), alias="STORAGE_DIR")
    public_url: str = Field("/uploads", alias="STORAGE_PUBLIC_URL")
    bucket: str = Field("listing-photos", alias="STORAGE_BUCKET")
    max_upload_bytes: int = Field(10 * 1024 * 1024, ge=1, alias="MAX_UPLOAD_BYTES")


class GeocodingConfig(_Section):
    enabled: bool = Field(True, alias="GEOCODER_ENABLED")
    url: str = Field("https://nominatim.openstreetmap.org/search", alias="GEOCODER_URL")
    country_codes: str = Field("ca", alias="GEOCODER_COUNTRY_CODES")
    user_agent: str = Field("NestFinder/1.0", alias="GEOCODER_USER_AGENT")
    timeout: float = Field(10.0, ge=0.1, alias="GEOCODER_TIMEOUT")

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class ScraperConfig(_Section):
    enabled: bool = Field(True, alias="SCRAPER_ENABLED")
    timeout: float = Field(10.0, ge=0.1, alias="SCRAPER_TIMEOUT")
    max_chars: int = Field(4000, ge=1, alias="SCRAPER_MAX_CHARS")
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; NestFinder/1.0)", alias="SCRAPER_USER_AGENT"
    )

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class ResilienceConfig(_Section):
    max_retries: int = Field(1, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.5, ge=0.0, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(4.0, ge=0.0, alias="RESILIENCE_BACKOFF_CAP")
    circuit_fail_threshold: int = Field(5, ge=1, alias="RESILIENCE_CIRCUIT_THRESHOLD")
    circuit_reset_timeout: float = Field(60.0, ge=0.0, alias="RESILIENCE_CIRCUIT_RESET")


class SecurityConfig(_Section):
    # CORS
    allowed_origins: list[str] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting (login only)
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # Reverse proxy hops whose X-Forwarded-* headers are honoured
    trusted_proxies: int = Field(0, ge=0, alias="TRUSTED_PROXIES")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class ObservabilityConfig(_Section):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class AdminSeedConfig(_Section):
    username: str | None = Field(None, alias="ADMIN_USERNAME")
    password: str | None = Field(None, alias="ADMIN_PASSWORD")
    display_name: str | None = Field(None, alias="ADMIN_DISPLAY_NAME")


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _storage_config_factory() -> StorageConfig:
    return StorageConfig()  # type: ignore[call-arg]


def _geocoding_config_factory() -> GeocodingConfig:
    return GeocodingConfig()  # type: ignore[call-arg]


def _scraper_config_factory() -> ScraperConfig:
    return ScraperConfig()  # type: ignore[call-arg]


def _resilience_config_factory() -> ResilienceConfig:
    return ResilienceConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _admin_seed_config_factory() -> AdminSeedConfig:
    return AdminSeedConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    jwt_secret: str | None = Field(None, alias="JWT_SECRET")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    storage: StorageConfig = Field(default_factory=_storage_config_factory)
    geocoding: GeocodingConfig = Field(default_factory=_geocoding_config_factory)
    scraper: ScraperConfig = Field(default_factory=_scraper_config_factory)
    resilience: ResilienceConfig = Field(default_factory=_resilience_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    admin: AdminSeedConfig = Field(default_factory=_admin_seed_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.jwt_secret in (None, "", DEFAULT_JWT_SECRET):
            print(
                "\n❌ CRITICAL SECURITY ERROR: JWT_SECRET is not configured in production!\n"
                "   Session tokens would be signed with a publicly known default.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    @property
    def signing_secret(self) -> str:
        return self.jwt_secret or DEFAULT_JWT_SECRET

    @property
    def uses_default_secret(self) -> bool:
        return not self.jwt_secret


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DEFAULT_JWT_SECRET",
    "SESSION_LIFETIME_SECONDS",
    "load_config",
]
