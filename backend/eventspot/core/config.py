"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "EventSpot API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (SQLite file by default, seeded on first start)
    DATABASE_URL: str = "sqlite+aiosqlite:///./eventspot.db"
    DATABASE_URL_SYNC: str = "sqlite:///./eventspot.db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_SEED_ON_STARTUP: bool = True

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_CACHE_TTL: int = 300  # 5 minutes default TTL
    REDIS_ENABLED: bool = False

    # CORS (the browser client sends the session cookie cross-origin in development)
    CORS_ORIGINS: list[str] = ["http://localhost:5000", "http://127.0.0.1:5000"]

    # Sessions
    SESSION_COOKIE_NAME: str = "eventspot.sid"
    SESSION_TTL_SECONDS: int = 24 * 60 * 60  # sliding expiry

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
