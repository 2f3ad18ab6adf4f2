from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    APP_NAME: str = "Inventory Ledger API"
    APP_VERSION: str = "1.0.0"

    # Single-file SQLite database by default; any SQLAlchemy URL works
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # Allowed CORS origin, "*" allows any origin
    FRONTEND_URL: str = "*"

    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
