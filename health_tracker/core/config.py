"""
Centralized application configuration.

This module uses Pydantic's BaseSettings to load configuration from
environment variables and a .env file, providing a single, type-safe
source of truth for all settings.
"""

from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Core API Settings ---
    PROJECT_NAME: str = "Health Tracker API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # --- Database Settings ---
    DATABASE_URL: str = "postgresql://postgres@localhost/health_tracker_db"

    # --- Language Model (Groq) Settings ---
    GROQ_API_KEY: Optional[str] = None
    GROQ_BASE_URL: Optional[str] = None
    LLM_MODEL_NAME: str = "openai/gpt-oss-20b"
    TEMPERATURE: float = 0.1

    # --- Encryption of health profile data at rest ---
    ENCRYPTION_KEY: Optional[str] = None

    # --- Demo user used when no X-User-ID header is sent ---
    DEMO_USERNAME: str = "demo"
    DEMO_PASSWORD: str = "demo"
    SEED_DEMO_DATA: bool = False

    # --- Notification checks ---
    NOTIFICATION_CHECK_SECONDS: int = 30
    SNOOZE_MINUTES: int = 10

    # --- Pydantic Model Configuration ---
    class Config:
        """Loads settings from the specified .env file."""
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore"


# Create a single, globally accessible settings instance
settings = Settings()
