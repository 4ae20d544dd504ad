"""Runtime settings loaded from environment variables (prefix ``RECALL_``)."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECALL_", env_file=".env", extra="ignore")

    # Inference backend
    ollama_url: str = "http://127.0.0.1:11434"
    embedding_model: str = "nomic-embed-text"

    # Model routing
    default_model: Optional[str] = None
    fallback_model: str = "llama3.2-latest"
    default_max_tokens: int = Field(default=2048, gt=0)
    models_config_path: Optional[Path] = None

    # Persistence
    database_url: str = "sqlite:///recall.db"

    # Chat turn
    history_limit: int = Field(default=20, gt=0)
    memory_top_k: int = Field(default=5, gt=0)
    memory_min_similarity: float = 0.5
    temperature: float = 0.7
    reply_language: str = "English"
    background_concurrency: int = Field(default=8, gt=0)

    # HTTP
    host: str = "127.0.0.1"
    port: int = 8000
    identity_header: str = "X-Authenticated-User"
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()
