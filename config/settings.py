"""
Browse resolver service settings.

Configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Browse resolver service configuration."""

    # Service
    app_name: str = "browse-resolver"
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False
    cors_origins: str = "*"

    # Catalog service
    catalog_base_url: str = "http://localhost:5000/api/"
    catalog_timeout_seconds: float = 5.0
    location_search_timeout_seconds: float = 2.0
    location_search_failure_threshold: int = 5
    location_search_recovery_seconds: int = 60

    # Listing query service
    listing_base_url: str = "http://localhost:5000/api/"
    listing_timeout_seconds: float = 5.0

    # Catalog cache (empty URL disables caching)
    redis_url: str = ""
    catalog_cache_ttl_seconds: int = 900

    # Browse sessions
    max_browse_sessions: int = 10000

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def get_cors_origins(self) -> List[str]:
        """
        Get list of allowed CORS origins.

        Returns:
            Origins from the comma-separated setting.
        """
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance.
    """
    return Settings()
