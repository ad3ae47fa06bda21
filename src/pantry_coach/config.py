"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from pantry_coach.domain.profile import DIET_TYPES, DietType

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["file", "supabase"] = "file"
    data_dir: Path = Path(".pantry_coach")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "pantry_state"
    timezone: str = "UTC"
    history_limit: int = 100
    suggestion_limit: int = 10
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "high"
    openai_store: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_diet_type(raw: str | None) -> DietType | None:
    """Parse a diet type name, ignoring case and surrounding spaces."""
    if raw is None:
        return None
    cleaned = raw.strip().lower()
    if cleaned in DIET_TYPES:
        return cleaned
    return None
