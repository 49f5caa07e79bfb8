"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (prefixed with TYPECHESS_)."""

    model_config = SettingsConfigDict(
        env_prefix="TYPECHESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./typechess.db"
    echo_sql: bool = False

    # Logging
    log_level: str = "INFO"

    # Undo/redo: maximum number of snapshots kept per game (0 = keep everything)
    history_limit: int = 0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
