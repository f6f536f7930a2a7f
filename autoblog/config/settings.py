"""
Configuration settings for Autoblog
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Text generation backend
    llm_provider: str = Field(default="gemini")  # gemini, ollama
    gemini_api_key: Optional[str] = Field(default=None)
    gemini_model: str = Field(default="gemini-2.0-flash")
    ollama_host: str = Field(default="http://127.0.0.1:11434")
    ollama_model: str = Field(default="gemma3:1b")
    ollama_embed_model: str = Field(default="nomic-embed-text")

    # Embeddings (only used by the embedding similarity strategy)
    embedding_provider: str = Field(default="sentence-transformers")  # sentence-transformers, ollama
    embedding_model: str = Field(default="all-MiniLM-L6-v2")

    # Duplicate detection
    similarity_strategy: str = Field(default="lexical")  # lexical, embedding
    content_similarity_threshold: float = Field(default=0.5)
    embedding_similarity_threshold: float = Field(default=0.9)
    max_topic_attempts: int = Field(default=10, ge=1)
    max_content_retries: int = Field(default=3, ge=0)

    # Batch pacing
    batch_delay_seconds: float = Field(default=5.0, ge=0)
    max_batch_size: int = Field(default=10, ge=1)

    # Storage
    database_path: str = Field(default="autoblog.db")

    # Scheduling
    schedule_enabled: bool = Field(default=False)
    schedule_interval: str = Field(default="0 */6 * * *")  # crontab expression
    schedule_timezone: str = Field(default="UTC")

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000)
    debug: bool = Field(default=False)
    flask_secret_key: str = Field(default="autoblog-dev-key")

    # Paths
    log_dir: str = Field(default="logs")


@lru_cache
def get_settings() -> Settings:
    """Get application settings singleton"""
    return Settings()
