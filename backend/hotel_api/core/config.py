"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Hotel Management API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(
        "sqlite+aiosqlite:///./hotel.db", alias="DATABASE_URL"
    )
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    report_default_days: int = Field(30, alias="REPORT_DEFAULT_DAYS")
    report_top_count: int = Field(5, alias="REPORT_TOP_COUNT")
    bulk_max_items: int = Field(100, alias="BULK_MAX_ITEMS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
