# core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings, read from the environment (or ``.env``)."""

    PROJECT_NAME: str = "Post Content Extractor"
    PORT: int = 3000
    DEBUG: bool = False
    WORKERS: int = 1
    LOG_LEVEL: str = "INFO"
    ALLOWED_HOSTS: List[str] = ["*"]

    # Page provider
    DEFAULT_USER_AGENT: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0 Safari/537.36"
    )
    NAVIGATION_TIMEOUT: float = 30.0
    FALLBACK_NAVIGATION_TIMEOUT: float = 15.0
    HYDRATION_WAIT: float = 3.0
    CONTENT_WAIT_TIMEOUT: float = 10.0
    LI_AT: Optional[str] = None

    # Extraction
    EXTRACTION_PROFILE: str = "linkedin"

    # Batches
    MAX_BATCH_SIZE: int = 10
    BATCH_CONCURRENCY: int = 1
    TARGET_TIMEOUT: float = 120.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
