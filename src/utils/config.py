"""
Configuration management using pydantic-settings.

Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///data/claims.db",
        description="SQLAlchemy database URL for the claims store",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")
    cors_origins: List[str] = Field(
        default=["http://localhost:8501", "http://127.0.0.1:8501"],
        description="Front-end origins allowed to call the API",
    )

    # Claim Intake Configuration
    claim_number_attempts: int = Field(
        default=5,
        ge=1,
        description="How many fresh claim numbers to try when the store reports a collision",
    )

    # Front-end Configuration
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL the front-ends use to reach the claims API",
    )
    api_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout for front-end API calls (seconds)",
    )

    @property
    def log_level(self) -> str:
        """Log level derived from the debug flag."""
        return "DEBUG" if self.debug else "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading environment on every call.
    """
    return Settings()
