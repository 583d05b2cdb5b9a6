"""
Runtime settings read from the environment (and a local .env file).

Uses pydantic-settings for environment variable parsing. Every field maps
to a ``SKIRMISH_``-prefixed variable (``plies`` -> ``SKIRMISH_PLIES``).

Only deployment knobs live here. Game rules and evaluation weights are
fixed in the engine and are not configurable.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings loaded from environment variables."""

    # Search
    plies: int = Field(
        default=2,
        description="Search depth used when a request does not give one",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level passed to configure_logging()",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("plies")
    @classmethod
    def _check_plies(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"plies must be >= 1: {value}")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance (call ``get_settings.cache_clear()`` in tests)."""
    return Settings()
