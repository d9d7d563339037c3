"""Application configuration via environment variables."""

import json
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream HRMS API
    API_BASE_URL: str = "http://localhost:5000"
    API_TIMEOUT_SECONDS: float = 15.0

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:3000"]'

    # Views
    SEARCH_DEBOUNCE_MS: int = 500
    DASHBOARD_ANNOUNCEMENT_LIMIT: int = 10
    OFFER_REDIRECT_DELAY_MS: int = 3000
    OFFER_RESPONSE_RATE_LIMIT: str = "10/minute"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:3000"]

    @property
    def search_debounce_seconds(self) -> float:
        return self.SEARCH_DEBOUNCE_MS / 1000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
