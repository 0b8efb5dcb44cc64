from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # OpenAI embeddings
    openai_api_key: str | None = None
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int | None = None
    openai_timeout: float = 30.0
    openai_max_retries: int = 2

    # Redis cache
    redis_url: str = "redis://localhost:6379/0"
    cache_default_ttl: int = 300  # 5 minutes
    suggestion_cache_ttl: int = 300

    # Suggestions
    suggestions_count: int = 20
    keyword_candidate_limit: int = 50

    # Pagination segment capacities
    tag_segment_size: int = 2000
    content_segment_size: int = 2000
    content_tag_segment_size: int = 100


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process; callers pass the result explicitly."""
    return Settings()
