"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from litscout.constants import (
    BUSINESS_SIMILARITY_THRESHOLD,
    CACHE_TTL,
    DEFAULT_CACHE_DIR,
    DEFAULT_CONTACT_EMAIL,
    DEFAULT_TIMEOUT,
    GENERAL_SIMILARITY_THRESHOLD,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    ncbi_api_key: str = ""
    apify_api_key: str = ""
    core_api_key: str = "free"
    anthropic_api_key: str = ""

    # Polite-pool identity for OpenAlex / Crossref
    contact_email: str = DEFAULT_CONTACT_EMAIL

    # LLM Settings
    llm_model: str = "claude-sonnet-4-6"

    # HTTP
    http_timeout_seconds: float = DEFAULT_TIMEOUT
    http_max_retries: int = 0
    requests_per_second: float = 5.0

    # Raw response cache
    cache_enabled: bool = False
    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_ttl_seconds: int = CACHE_TTL

    # Deduplication
    general_similarity_threshold: float = GENERAL_SIMILARITY_THRESHOLD
    business_similarity_threshold: float = BUSINESS_SIMILARITY_THRESHOLD

    # Journal ranking reference table (CSV)
    journal_rankings_path: Path | None = None

    # App Settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
