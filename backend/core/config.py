from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./scenario.db"

    # Backend
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    LOG_SQL: bool = False   # Enable SQLAlchemy query logging

    # Validation
    VALIDATION_DEFAULT_LOCALE: str = "en"
    VALIDATION_MODE: str = "collect_all"          # collect_all | fail_fast
    VALIDATION_PREDICATE_TIMEOUT: float | None = 5.0  # Seconds, None disables the bound
    VALIDATION_MAX_CONCURRENCY: int | None = None
    VALIDATION_PREDICATE_ERRORS: str = "violation"  # violation | raise

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
