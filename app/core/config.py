"""Application configuration via Pydantic Settings."""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Settings
    PROJECT_NAME: str = "Memory Manager API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    PORT: int = 3011

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    BACKEND_CORS_ORIGINS: List[str] = []

    # Rate Limiting (slowapi limit string, per client address)
    RATE_LIMIT: str = "100/second"
    RATE_LIMIT_ENABLED: bool = True

    # Vector Store Backend ("qdrant" or "pgvector")
    VECTOR_STORE_BACKEND: str = "qdrant"

    # Postgres Settings (pgvector backend)
    DATABASE_URL: Optional[str] = None

    # Qdrant Settings
    # QDRANT_URL wins over host/port when set (e.g. Qdrant Cloud)
    QDRANT_URL: Optional[str] = None
    QDRANT_HOST: str = "localhost"
    QDRANT_PORT: int = 6333
    QDRANT_API_KEY: Optional[str] = None
    QDRANT_COLLECTION: str = "streamer_memory"

    # Embedding Configuration
    EMBEDDING_PROVIDER: str = "openai"  # "openai" or "local"
    EMBEDDING_MODEL_NAME: Optional[str] = None  # None = provider default
    OPENAI_API_KEY: str = ""  # Required for the openai provider

    # Specificity / Trim Scoring
    K_MAX: int = 100
    W_AGE: float = 1.0
    W_RECENCY: float = 1.5
    C_USAGE: float = 1.0

    # Trimming
    TRIM_THRESHOLD: float = 500000.0
    TRIM_BATCH_SIZE: int = 100
    MIN_AGE_BEFORE_TRIM_SECONDS: Optional[int] = None
    TRIM_SCHEDULE: str = "0 4 * * *"  # Cron: 4 AM daily

    # Search defaults
    DEFAULT_TOP_K: int = 50
    DEFAULT_RETRIEVE_N: int = 10

    # Background Jobs
    ENABLE_BACKGROUND_JOBS: bool = True  # Set false locally to skip the trimming job


# Global settings instance
settings = Settings()
