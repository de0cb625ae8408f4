from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Languages
    DEFAULT_LANGUAGE: str = "en"
    FALLBACK_TEMPLATE: str = "The :attr field failed the :rule rule."

    # Rules
    DATE_FORMAT: str = "%Y-%m-%d"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    class Config:
        env_prefix = "FIELDCHECK_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
