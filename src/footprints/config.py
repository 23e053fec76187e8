"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["file", "supabase"] = "file"
    storage_dir: Path = Path(".footprints")
    storage_key: str = "shareListData"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    photo_inbox_dir: Path = Path(".footprints/inbox")
    photo_library_dir: Path = Path(".footprints/photos")
    device_latitude: float | None = None
    device_longitude: float | None = None
    geocoder_base_url: str | None = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "footprints/0.1"
    provider_timeout_seconds: float | None = 30.0
    fallback_theme: str | None = "Untitled footprint"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
