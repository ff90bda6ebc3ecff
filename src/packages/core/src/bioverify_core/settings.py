"""Pipeline settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pipeline settings, read from the environment or a .env file."""

    redis_url: str = "redis://redis:6379/0"
    queue_name: str = "default"
    job_timeout: int = -1
    poll_interval_seconds: float = 30.0
    # None keeps polling until the provider reports a terminal status
    poll_timeout_seconds: float | None = None
    provider_timeout_seconds: float = 60.0
    provider_retries: int = 3
    progress_batch_size: int = 50
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
