"""Environment-driven configuration helpers for ParlayForge."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PARLAYFORGE_",
        extra="ignore",
    )

    database_url: AnyUrl | str = Field(default="sqlite:///./parlayforge.db")
    log_level: str = Field(default="INFO")

    leg_pool_size: int = Field(default=100, ge=1)
    min_leg_probability: float = Field(default=0.50, gt=0.0, le=1.0)
    max_legs_per_match: int = Field(default=2, ge=1)
    max_matches_explored: int = Field(default=20, ge=2)
    max_sgp_legs_per_match: int = Field(default=10, ge=2)
    max_combinations_per_leg_count: int = Field(default=5000, ge=1)
    max_combinations_total: int = Field(default=10000, ge=1)
    generation_workers: int = Field(default=1, ge=1, le=32)

    api_port: int = Field(default=8000, ge=1, le=65535)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


def configure_logging(level: str | None = None) -> None:
    """Apply a basic root logging configuration for CLI entry points."""

    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
