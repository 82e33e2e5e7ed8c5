"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the service.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # MongoDB configuration
    MONGODB_URL: str = "mongodb://localhost:27017/?replicaSet=rs0"
    MONGODB_DATABASE: str = "chat-service"
    MONGODB_TIMEOUT_MS: Optional[int] = None
    REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: list[str] = []

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
