"""
Application configuration using Pydantic Settings.

Scheduling limits and infrastructure settings are read from the environment
(or a local .env file).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Debug
    # ===========================================
    DEBUG: bool = False

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./milestones.db"

    # ===========================================
    # Logging
    # ===========================================
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Recurring generation
    # ===========================================
    # Rolling lookahead used as the horizon of continuous projects
    CONTINUOUS_HORIZON_DAYS: int = 365

    # Lifetime ceiling of occurrences per template
    MAX_OCCURRENCES: int = 1000

    # Default batch size when topping up continuous projects
    CONTINUOUS_BATCH_SIZE: int = 20

    # Occurrence count at which a schedule is reported as excessive
    EXCESSIVE_OCCURRENCE_THRESHOLD: int = 50

    # ===========================================
    # Budget
    # ===========================================
    # Single-milestone share of the budget that triggers a warning
    ALLOCATION_WARNING_RATIO: float = 0.5


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
