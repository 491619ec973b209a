"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = "http://localhost:5000/api"
    api_timeout_seconds: float | None = None
    log_level: str = "INFO"
    session_file: Path = Path(".zanzibar_tours/session.json")
    map_center_lat: float = -6.1659
    map_center_lng: float = 39.2026
    map_zoom: int = 10
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
