"""Configuration management for the mongopager service."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application settings
    app_name: str = "Mongo Cursor Pagination API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # MongoDB settings
    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "mongopager"
    mongo_server_selection_timeout_ms: int = 5000
    mongo_tz_aware: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Pagination settings
    default_page_size: int = 25
    max_page_size: int = 200
    default_sort: str = "_id:asc"
    include_total_count: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def validate_page_size(cls, v):
        """Page sizes must be positive."""
        if v < 1:
            raise ValueError("Page size must be at least 1")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": True,
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
