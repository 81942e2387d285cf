from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # API Keys and Authentication
    NEWSAPI_KEY: Optional[str] = None
    LLM_API_KEY: Optional[str] = None
    CONTACT_EMAIL: str = "feed@betterfeed.local"
    USER_AGENT: str = "BetterFeed/1.0 (mailto:feed@betterfeed.local)"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///articles.db"

    # Source Fetching
    SOURCE_TIMEOUT: float = 15.0
    PAGE_FETCH_TIMEOUT: float = 10.0
    MAX_PAGE_BYTES: int = 2_000_000
    MAX_REDIRECTS: int = 5
    MAX_PER_SOURCE: int = 10
    SHUFFLE_RESULTS: bool = True

    # Retry Configuration
    MAX_RETRIES: int = 2
    RETRY_MIN_WAIT: float = 0.5
    RETRY_MAX_WAIT: float = 4.0

    # LLM Configuration (any OpenAI-compatible endpoint, DeepSeek by default)
    LLM_BASE_URL: str = "https://api.deepseek.com"
    LLM_MODEL: str = "deepseek-chat"
    LLM_MAX_WORDS: int = 200
    LLM_MAX_TOKENS: int = 500
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT: float = 30.0

    # Background Enrichment
    ENRICH_BATCH_SIZE: int = 2
    ENRICH_BATCH_PAUSE: float = 1.0

    # Content Quality Heuristics
    MIN_TEXT_LENGTH: int = 50
    MIN_PARAGRAPH_LENGTH: int = 40
    MAX_CONTENT_CHARS: int = 5000
    FALLBACK_SUMMARY_CHARS: int = 300
    MAX_SYMBOL_RATIO: float = 0.5
    MAX_SINGLE_CHAR_TOKEN_RATIO: float = 0.5

    class Config:
        env_file = ".env"
        case_sensitive = True

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
