"""Application configuration module.

This module contains settings for the URL shortener application,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


def build_database_uri(location: str) -> str:
    """Turn a storage location into an async SQLAlchemy URL.

    A location that already carries a scheme (``postgresql+asyncpg://...``,
    ``sqlite+aiosqlite:///...``) is used as is; anything else is treated as
    an SQLite file path, or ``:memory:``.
    """
    if "://" in location:
        return location
    return f"sqlite+aiosqlite:///{location}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "URL Shortener"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Alias to URL shortening service"

    # API Configuration
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # Aliases longer than this are rejected before reaching storage
    ALIAS_MAX_LENGTH: int = 64

    # Storage
    STORAGE_PATH: str = "./storage/storage.db"
    DATABASE_URL: Optional[str] = None  # Full async SQLAlchemy URL, wins over STORAGE_PATH
    DB_ECHO: bool = False
    DB_CONNECT_TIMEOUT: float = 5.0  # Seconds to wait on a locked database / connect

    # PostgreSQL pool settings (ignored for SQLite)
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_TO_FILE: bool = False
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[request_id]} | {message}"
    LOG_JSON: bool = False
    REQUEST_LOGGING_ENABLED: bool = True

    @field_validator("DATABASE_URL", mode="before")
    def empty_database_url_to_none(cls, v):
        """Treat an empty DATABASE_URL as unset."""
        if v == "":
            return None
        return v

    @field_validator("LOG_LEVEL")
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return build_database_uri(self.STORAGE_PATH)


# Create a singleton instance of the settings
settings = Settings()
