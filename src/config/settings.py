"""
Farkle - Application Settings

Loads configuration from environment variables (or a local .env file) using
Pydantic Settings.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Rules
    min_score_to_board: int = Field(default=500, ge=0)
    winning_score: int = Field(default=10000, gt=0)

    # Supabase (optional, only needed for game history)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Application
    debug: bool = False
    log_level: str = "INFO"
    roll_display_delay_seconds: float = Field(default=0.5, ge=0)
    history_limit: int = Field(default=10, gt=0)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def history_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()
