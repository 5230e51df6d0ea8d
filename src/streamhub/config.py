"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamhub.cache.keys import CacheKeys


class StreamhubSettings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="STREAMHUB_",
    )

    # Storage
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON documents",
    )

    # Providers
    provider_timeout: float = Field(
        default=8.0,
        gt=0,
        description="Timeout in seconds for each provider request",
    )
    user_agent: str = Field(
        default="streamhub/1.0",
        description="User-Agent sent to providers",
    )
    generic_fallback_enabled: bool = Field(
        default=True,
        description="Serve the generic sample stream when nothing else matched",
    )

    # External APIs - Metadata
    tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB API key (credentials store value takes precedence)",
    )
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3")
    tmdb_image_base: str = Field(default="https://image.tmdb.org/t/p/w342")
    tmdb_backdrop_base: str = Field(default="https://image.tmdb.org/t/p/original")
    metadata_timeout: float = Field(
        default=6.0,
        gt=0,
        description="Timeout in seconds for metadata lookups",
    )

    # Telemetry
    log_capacity: int = Field(
        default=500,
        ge=1,
        description="Maximum number of event log entries kept",
    )
    error_capacity: int = Field(
        default=200,
        ge=1,
        description="Maximum number of HTTP errors kept in stats",
    )

    # App settings
    host: str = Field(
        default="127.0.0.1",
        description="Address the API binds to",
    )
    port: int = Field(
        default=7000,
        description="Port the API listens on",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def streams_path(self) -> Path:
        return self.data_dir / CacheKeys.STREAMS_DOCUMENT

    @property
    def stats_path(self) -> Path:
        return self.data_dir / CacheKeys.STATS_DOCUMENT

    @property
    def logs_path(self) -> Path:
        return self.data_dir / CacheKeys.LOGS_DOCUMENT

    @property
    def providers_path(self) -> Path:
        return self.data_dir / CacheKeys.PROVIDERS_DOCUMENT

    @property
    def credentials_path(self) -> Path:
        return self.data_dir / CacheKeys.CREDENTIALS_DOCUMENT


@lru_cache
def get_settings() -> StreamhubSettings:
    """Get cached settings instance."""
    return StreamhubSettings()


def configure_logging(level: str = "INFO") -> None:
    """Install a basic stderr handler for the service process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
