"""Application configuration via environment variables."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Log level names accepted in LOG_LEVEL, mapped onto stdlib levels.
LOG_LEVELS: dict[str, int] = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


class Settings(BaseSettings):
    """Environment-based configuration. Validated at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    APP_NAME: str = Field(default="api-starter", description="Service name for logs and docs")
    NODE_ENV: Literal["development", "production", "test"] = Field(
        default="production", description="Application environment"
    )

    HOST: str = Field(default="0.0.0.0", description="Bind address; 0.0.0.0 for containers")
    PORT: int = Field(default=3000, ge=1, le=65535, description="Port the server listens on")
    FASTIFY_CLOSE_GRACE_DELAY: int = Field(
        default=500, ge=0, description="Milliseconds to wait before forcing shutdown"
    )

    CORS_ORIGINS: str | None = Field(
        default=None, description="Comma-separated list of allowed CORS origins (production only)"
    )

    LOG_LEVEL: Literal["fatal", "error", "warn", "info", "debug", "trace"] = Field(default="info")
    LOG_JSON: bool = Field(default=False, description="JSON logs for cloud aggregators")

    @field_validator("LOG_LEVEL", "NODE_ENV", mode="before")
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def cors_origins_list(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return []
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.NODE_ENV == "development"

    @property
    def is_production(self) -> bool:
        return self.NODE_ENV == "production"

    @property
    def close_grace_delay_seconds(self) -> float:
        return self.FASTIFY_CLOSE_GRACE_DELAY / 1000

    @property
    def python_log_level(self) -> int:
        return LOG_LEVELS[self.LOG_LEVEL]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance. Use for DI; avoids re-reading env on every request."""
    return Settings()

