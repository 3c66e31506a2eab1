"""Application configuration module.

This module contains settings for the snaplink URL shortener,
loaded from environment variables (or a .env file) with appropriate defaults.
"""

from __future__ import annotations

import logging
import string
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union
from urllib.parse import urlsplit

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up basic logger for config module
logger = logging.getLogger(__name__)

# Base directory of the package
BASE_DIR = Path(__file__).resolve().parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class StoreBackend(str, Enum):
    """Which adapter persists the code -> long URL mapping."""
    SQL = "sql"
    REST = "rest"


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

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "snaplink"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "A small URL shortening service"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DEBUG: bool = False

    # Public origin for short links; None means derive it from the request
    BASE_URL: Optional[str] = None
    API_PREFIX: str = "/api"
    STATIC_DIR: str = str(BASE_DIR / "static")

    # Short code shape and allocation
    URL_CODE_LENGTH: int = 6
    URL_CODE_CHARS: str = string.ascii_letters + string.digits
    URL_ALLOCATION_MAX_ATTEMPTS: int = 10
    URL_MAX_LENGTH: int = 2048

    # Store: Supabase REST collection
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    SUPABASE_TABLE: str = "urls"
    STORE_TIMEOUT: float = 10.0

    # Store: relational database
    DATABASE_URL: Optional[str] = None
    DB_PATH: Optional[str] = None
    DB_ECHO: bool = False
    POSTGRES_POOL_SIZE: int = 10
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300

    # Security headers
    CSP_STYLE_ORIGINS: Union[List[str], str] = ["https://fonts.googleapis.com"]
    CSP_FONT_ORIGINS: Union[List[str], str] = ["https://fonts.gstatic.com"]
    HSTS_MAX_AGE: int = 31536000

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = True
    LOG_TO_FILE: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    # OpenTelemetry configuration
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "snaplink"
    OTEL_RESOURCE_ATTRIBUTES: str = ""
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_METRICS_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_PROTOCOL: str = "grpc"  # grpc or http/protobuf
    OTEL_TRACES_SAMPLER: str = "parentbased_traceidratio"
    OTEL_TRACES_SAMPLER_ARG: float = 1.0
    OTEL_METRICS_EXPORT_INTERVAL_MILLIS: int = 60000

    # Validators
    @field_validator("BASE_URL", "SUPABASE_URL", "SUPABASE_KEY", "DATABASE_URL", "DB_PATH", mode="before")
    def empty_string_to_none(cls, v: Any) -> Optional[str]:
        """Treat blank environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("CSP_STYLE_ORIGINS", "CSP_FONT_ORIGINS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("URL_CODE_CHARS")
    def validate_code_chars(cls, v: str) -> str:
        if len(set(v)) != len(v) or not v.isalnum():
            raise ValueError("URL_CODE_CHARS must be distinct alphanumeric characters")
        return v

    # Computed values
    @property
    def STORE_BACKEND(self) -> Optional[StoreBackend]:
        """Pick the store adapter: SUPABASE_URL wins over DATABASE_URL over DB_PATH."""
        if self.SUPABASE_URL:
            return StoreBackend.REST
        if self.DATABASE_URL or self.DB_PATH:
            return StoreBackend.SQL
        return None

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> Optional[str]:
        """Construct the async SQLAlchemy URI from DATABASE_URL or DB_PATH."""
        if self.DATABASE_URL:
            return to_async_database_url(self.DATABASE_URL)
        if self.DB_PATH:
            return f"sqlite+aiosqlite:///{self.DB_PATH}"
        return None

    @property
    def STORE_ORIGIN(self) -> Optional[str]:
        """Origin of the REST store, used in the Content-Security-Policy."""
        if not self.SUPABASE_URL:
            return None
        parts = urlsplit(self.SUPABASE_URL)
        if not parts.scheme or not parts.netloc:
            return None
        return f"{parts.scheme}://{parts.netloc}"


def to_async_database_url(url: str) -> str:
    """Rewrite a plain database URL to use an async driver.

    ``postgres://`` and ``postgresql://`` become ``postgresql+asyncpg://``;
    ``sqlite://`` becomes ``sqlite+aiosqlite://``. URLs that already name a
    driver are returned unchanged.
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        return url
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg://{rest}"
    if scheme == "sqlite":
        return f"sqlite+aiosqlite://{rest}"
    return url


# Create a singleton instance of the settings
settings = Settings()
