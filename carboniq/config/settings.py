"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_STORE_BACKENDS = {"memory", "supabase"}
_VALID_AUTH_BACKENDS = {"static", "supabase"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "CarbonIQ Farm Verification"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _VALID_STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {_VALID_STORE_BACKENDS}, got '{v}'")
        return lower

    @field_validator("auth_backend")
    @classmethod
    def validate_auth_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _VALID_AUTH_BACKENDS:
            raise ValueError(f"auth_backend must be one of {_VALID_AUTH_BACKENDS}, got '{v}'")
        return lower

    @model_validator(mode="after")
    def validate_timeouts(self) -> "Settings":
        if self.verification_delay_seconds < 0:
            raise ValueError(
                f"verification_delay_seconds must not be negative, got {self.verification_delay_seconds}"
            )
        if self.store_timeout <= 0:
            raise ValueError(f"store_timeout must be positive, got {self.store_timeout}")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*'], consider restricting in production"
            )
        return self

    @model_validator(mode="after")
    def validate_supabase_config(self) -> "Settings":
        if "supabase" in (self.store_backend, self.auth_backend):
            if not self.supabase_url:
                raise ValueError("supabase_url is required when a supabase backend is selected")
            if not self.supabase_anon_key:
                raise ValueError("supabase_anon_key is required when a supabase backend is selected")
        return self

    # CORS
    allowed_origins: list[str] = ["*"]

    # Verification
    verification_delay_seconds: float = 2.0
    verification_seed: int | None = None

    # Record store
    store_backend: str = "memory"
    store_timeout: float = 10.0
    farms_table: str = "farms"

    # Authentication
    auth_backend: str = "static"
    # token -> user id, only used by the static backend
    static_auth_tokens: dict[str, str] = {}

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_key: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
