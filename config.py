from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///twitter_apps.db"

    # Credential store backend: "database" or "memory"
    STORE_BACKEND: str = "database"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Plugin System Settings
    PLUGINS_AUTO_DISCOVER: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"  # Allow extra fields from environment variables

@lru_cache()
def get_settings():
    return Settings()
