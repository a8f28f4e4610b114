"""
Configuration for FamilyBoard API.
Loads settings from environment variables.
"""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # API Configuration
    API_TITLE: str = "FamilyBoard API"
    API_VERSION: str = "0.1.0"

    # CORS Configuration
    # Comma-separated list of allowed origins
    ALLOWED_ORIGINS: str = (
        "http://localhost:3000,"
        "http://localhost:5173"
    )

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"
    LOG_TO_FILE: bool = True

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./storage/familyboard.db"
    SQL_ECHO: bool = False

    # Shopping list
    # Storage key used when a request names no household
    SHOPPING_LIST_KEY: str = "family_shopping_list"
    SHOPPING_DAYS_AHEAD: int = 7
    # 0 = Sunday ... 6 = Saturday
    WEEK_STARTS_ON: int = 0

    class Config:
        # Load from .env file if it exists
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Load settings (will use environment variables or .env file)
settings = Settings()
