"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Cat Facts API"
    database_url: str = "sqlite+pysqlite:///./cat_facts.db"
    cat_fact_api_url: str = "https://catfact.ninja/fact"
    cat_fact_timeout_seconds: int = 30
    cat_fact_user_agent: str = "CatFactsApp/1.0"
    fetch_max_count: int = 20
    fetch_dispatch_delay_seconds: float = 0.1
    fetch_max_workers: int = 5
    export_dir: str | None = None
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
