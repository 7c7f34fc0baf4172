"""Configuration data models."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ApiConfig(BaseModel):
    """Settings shared by the remote movie databases."""

    api_key: str = Field(..., description="API key; ${VAR} references are expanded")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")

    @field_validator("api_key")
    @classmethod
    def expand_api_key(cls, v: str) -> str:
        return os.path.expandvars(v)


class OMDbConfig(ApiConfig):
    """OMDb (primary provider) settings."""

    base_url: str = Field(default="https://www.omdbapi.com/", description="OMDb endpoint")


class TMDbConfig(ApiConfig):
    """TMDb (secondary provider) settings."""

    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API root")
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w780", description="Root URL of image downloads"
    )
    language: Optional[str] = Field(default=None, description="Language sent with requests")

    @field_validator("base_url", "image_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoints and image paths start with a slash."""
        return v.rstrip("/")


class StorageConfig(BaseModel):
    """Local storage settings."""

    database_url: str = Field(
        default="sqlite:///data/watchlist.db",
        description='SQLAlchemy database URL; "sqlite://" keeps the watchlist in memory',
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    images_path: str = Field(default="data/images", description="Directory for downloaded images")


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(default="INFO", description="Root logger level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="logging.Formatter format string",
    )
    file: Optional[str] = Field(default=None, description="Optional rotating log file")
    max_size_mb: int = Field(default=10, gt=0, description="Size at which the log file rotates")
    backup_count: int = Field(default=5, ge=0, description="Rotated log files to keep")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Logging level must be one of {', '.join(LOG_LEVELS)}")
        return level


class AppConfig(BaseModel):
    """Concurrency, timeout and paging settings."""

    max_workers: int = Field(default=10, gt=0, description="Concurrent outbound calls")
    queue_capacity: int = Field(default=100, ge=0, description="Calls allowed to wait for a worker")
    enrichment_timeout: Optional[float] = Field(
        default=None, gt=0, description="Timeout in seconds for adding one movie"
    )
    default_page_size: int = Field(default=10, gt=0, description="Default watchlist page size")
    max_page_size: int = Field(default=100, gt=0, description="Largest accepted page size")

    @field_validator("max_page_size")
    @classmethod
    def validate_max_page_size(cls, v: int, info: ValidationInfo) -> int:
        """Default page size must fit under the maximum."""
        default_size = info.data.get("default_page_size")
        if default_size is not None and default_size > v:
            raise ValueError(
                f"max_page_size ({v}) must not be smaller than default_page_size ({default_size})"
            )
        return v


class Config(BaseModel):
    """Root of the configuration file."""

    omdb: OMDbConfig
    tmdb: TMDbConfig
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    app: AppConfig = Field(default_factory=AppConfig)

    model_config = ConfigDict(validate_assignment=True)
