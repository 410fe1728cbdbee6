from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    API_PREFIX: str = "/api"

    # cors
    FRONTEND_ORIGIN: str | None = None
    # Explicit debug-only switch for wide-open CORS in non-prod envs
    CORS_ALLOW_ALL_ORIGINS: bool = False

    # website fetch
    FETCH_TIMEOUT_SECONDS: float = 10.0
    FETCH_USER_AGENT: str = "Mozilla/5.0 (compatible; VentureLensBot/1.0)"

    # enrichment
    ENRICH_TEXT_MAX_CHARS: int = 8000
    ENRICH_LEXICAL_SIGNALS: bool = True
    ENRICH_MAX_KEYWORDS: int = 8
    ENRICH_MAX_SIGNALS: int = 4

    # llm (optional; no key means heuristic-only enrichment)
    OPENROUTER_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.2
    LLM_TIMEOUT_SECONDS: float = 15.0
    # Hard cap on concurrent LLM calls per process
    LLM_MAX_CONCURRENCY: int = 4
    LLM_JSON_MODE: bool = True

    # per-company enrichment cache; disabled when unset
    REDIS_URL: str | None = None
    ENRICHMENT_CACHE_TTL_SECONDS: int = 60 * 60 * 24

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
