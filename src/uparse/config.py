"""Runtime settings for the scanner, registry and logging."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """uparse configuration, read from ``UPARSE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UPARSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Matching
    max_captures: int = 10  # most terminals accepted by one match call
    max_user_terminals: int = 6
    max_message: int = 120  # raised messages are cut to this many chars

    # Observability
    log_level: str = "WARNING"
    log_format: str = "console"  # console or json


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
