"""
Application Configuration
=========================
Centralized configuration management using Pydantic Settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LITELLM_PRICING_URL = (
    "https://raw.githubusercontent.com/BerriAI/litellm/main/model_prices_and_context_window.json"
)
PRICING_CACHE_FILE_NAME = "model_prices_and_context_window.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Metrics
    metrics_enabled: bool = True

    # Pricing data sources
    pricing_remote_url: str = LITELLM_PRICING_URL
    pricing_remote_timeout: float = Field(default=30.0, gt=0)
    pricing_cache_dir: Path = Field(default_factory=lambda: Path.home() / ".cache")
    pricing_cache_max_age_hours: float = Field(default=24.0, gt=0)

    # Refresher
    pricing_refresh_enabled: bool = True
    pricing_refresh_interval_hours: float = Field(default=24.0, gt=0)

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def pricing_cache_path(self) -> Path:
        """Full path of the local pricing cache file."""
        return self.pricing_cache_dir / PRICING_CACHE_FILE_NAME


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
