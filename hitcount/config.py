"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


class Settings(BaseSettings):
    """Runtime settings for the Hitcount API."""

    app_name: str = "Hitcount"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    count_ttl_seconds: int = 900
    client_ip_header: str = "cf-connecting-ip"
    health_path: str = "/healthz"
    listen_address: str = "0.0.0.0:8080"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("count_ttl_seconds")
    @classmethod
    def _ttl_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("count_ttl_seconds must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        level = LOG_LEVEL_ALIASES.get(level, level)
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Return cached settings so env parsing only happens once."""

    return Settings()
