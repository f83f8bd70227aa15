"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Chunav"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173"

    # Database
    database_url: str = "sqlite:///./chunav.db"

    # Election scope
    default_state: str = "Bihar"
    default_total_constituencies: int = 243
    min_predictions_to_submit: int = 50

    # Coin policy
    coins_per_create: int = 5
    coins_per_update: int = 3
    coins_per_lock: int = 10
    coins_per_delete: int = 2
    coins_per_locked_on_reset: int = 15  # create + lock
    submission_bonus: int = 50

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
