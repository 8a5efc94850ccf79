"""Application settings using Pydantic."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Waitlist engine settings loaded from environment variables.

    This uses Pydantic to:
    1. Load values from .env file
    2. Validate data types
    3. Provide defaults
    """

    PROJECT_NAME: str = "salon-waitlist-engine"
    VERSION: str = "1.0.0"

    # Environment & Logging
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_JSON: bool = False

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None  # anon key, not used by the batch jobs
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None  # bypasses RLS; required for the jobs

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"

    # Batch sizes per invocation
    WAITLIST_EXPIRED_OFFER_BATCH_SIZE: int = 200
    WAITLIST_COOLDOWN_BATCH_SIZE: int = 500
    WAITLIST_REMINDER_BATCH_SIZE: int = 200

    # Beat cadence (seconds)
    WAITLIST_EXPIRY_INTERVAL_SECONDS: float = 60.0
    WAITLIST_REACTIVATION_INTERVAL_SECONDS: float = 300.0
    WAITLIST_REMINDER_INTERVAL_SECONDS: float = 120.0

    # Reminders go out this many minutes before an offer's token expires
    WAITLIST_REMINDER_LEAD_MINUTES: int = 10

    # When the policy RPC errors: True falls back to defaults, False fails the row
    WAITLIST_POLICY_ERROR_FALLBACK: bool = True

    # External collaborators, as "package.module:attribute"
    WAITLIST_NEXT_CANDIDATE_NOTIFIER: Optional[str] = None
    WAITLIST_REMINDER_SENDER: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_file_encoding='utf-8',
        extra="ignore"  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance.
    """
    return Settings()


# Create a single instance for easy importing
settings = get_settings()
