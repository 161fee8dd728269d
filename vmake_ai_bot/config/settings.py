"""
Application settings and configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application configuration settings."""

    # Application settings
    app_name: str = "VMake AI Bot"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    environment: str = "development"
    debug: bool = False

    # FastAPI settings
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    api_reload: bool = True
    cors_origin: str = "http://localhost:3000"

    # Gemini settings (served through the OpenAI-compatible endpoint)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    ai_provider: str = "gemini"
    ai_timeout_seconds: float = 30.0

    # Google Sheets settings
    google_sheet_id: str = ""
    google_sheet_name: str = "Sheet1"
    google_credentials: str = ""
    google_credentials_file: str = "credentials.json"

    # Chat client settings
    api_base_url: str = "http://localhost:3001"
    client_timeout_seconds: float = 120.0
    client_retry_attempts: int = 3

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins, parsed from the comma-separated CORS_ORIGIN."""
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def sheets_configured(self) -> bool:
        return bool(self.google_sheet_id)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Returns a cached instance of the application settings."""
    return Settings()
