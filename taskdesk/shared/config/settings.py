# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field(..., min_length=1, alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _ENV


class GitHubConfig(BaseSettings):
    client_id: str | None = Field(None, alias="GITHUB_CLIENT_ID")
    client_secret: str | None = Field(None, alias="GITHUB_CLIENT_SECRET")
    timeout: float = Field(10.0, ge=0.1, alias="GITHUB_TIMEOUT")
    max_retries: int = Field(2, ge=0, alias="GITHUB_RETRIES")
    backoff_base: float = Field(0.5, ge=0.0, alias="GITHUB_BACKOFF_BASE")
    scope: str = Field("user:email", alias="GITHUB_SCOPE")

    model_config = _ENV

    def is_configured(self) -> bool:
        return bool(self.client_id) and bool(self.client_secret)

    def missing_details(self) -> dict[str, str]:
        return {
            "clientId": "Present" if self.client_id else "Missing",
            "clientSecret": "Present" if self.client_secret else "Missing",
        }


class StorageConfig(BaseSettings):
    directory: Path = Field(Path("instance/uploads"), alias="STORAGE_DIR")
    max_upload_bytes: int = Field(20 * 1024 * 1024, ge=1, alias="MAX_UPLOAD_BYTES")

    model_config = _ENV


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, gt=0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _ENV

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_flag(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _github_config_factory() -> GitHubConfig:
    return GitHubConfig()  # type: ignore[call-arg]


def _storage_config_factory() -> StorageConfig:
    return StorageConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    port: int = Field(5000, ge=1, le=65535, alias="PORT")
    jwt_secret: str = Field(..., min_length=1, alias="JWT_SECRET")
    token_ttl_seconds: int = Field(24 * 60 * 60, ge=1, alias="TOKEN_TTL_SECONDS")
    frontend_url: str = Field("http://localhost:5173", alias="FRONTEND_URL")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: Path | None = Field(None, alias="LOG_FILE")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    github: GitHubConfig = Field(default_factory=_github_config_factory)
    storage: StorageConfig = Field(default_factory=_storage_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("frontend_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_flag(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.jwt_secret in ("dev", "development", "test", "secret") or len(self.jwt_secret) < 32:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a strong random value of at least 32 characters.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if not self.github.is_configured():
            warnings.append("⚠️  GitHub OAuth credentials are not configured")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


class ClientConfig(BaseSettings):
    """Settings read by the Python API client."""

    api_url: str = Field(
        "http://localhost:5000",
        validation_alias=AliasChoices("TASKDESK_API_URL", "VITE_API_URL", "api_url"),
    )
    github_client_id: str | None = Field(
        None,
        validation_alias=AliasChoices(
            "GITHUB_CLIENT_ID", "VITE_GITHUB_CLIENT_ID", "github_client_id"
        ),
    )
    session_file: Path = Field(
        Path.home() / ".taskdesk" / "session.json",
        validation_alias=AliasChoices("TASKDESK_SESSION_FILE", "session_file"),
    )
    timeout: float = Field(
        15.0, ge=0.1, validation_alias=AliasChoices("TASKDESK_TIMEOUT", "timeout")
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("api_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "ClientConfig",
    "DatabaseConfig",
    "GitHubConfig",
    "SecurityConfig",
    "StorageConfig",
    "load_config",
]
