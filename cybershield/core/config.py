"""
Configuration settings using Pydantic
Loads environment variables from .env file
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""

    # Server configuration
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:8000", "http://127.0.0.1:8000"],
        description="Allowed CORS origins"
    )

    # Request limits
    DEFAULT_URL_SCHEME: str = Field(default="https", description="Scheme assumed when a submitted URL has none")
    MAX_URL_LENGTH: int = Field(default=2048, description="Maximum URL length accepted for analysis")
    MAX_EMAIL_CONTENT_LENGTH: int = Field(default=50000, description="Maximum email body length in characters")
    MAX_HTML_CONTENT_LENGTH: int = Field(default=2_000_000, description="Maximum HTML body length in characters")
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, description="Maximum .eml upload size")

    # Rate limiting (slowapi syntax)
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enforce per-client rate limits")
    ANALYZE_RATE_LIMIT: str = Field(default="30/minute", description="Rate limit for JSON analysis endpoints")
    UPLOAD_RATE_LIMIT: str = Field(default="10/minute", description="Rate limit for file uploads and webhooks")

    # Alerting
    ALERTS_ENABLED: bool = Field(default=True, description="Emit threat alerts for positive verdicts")
    ALERT_MIN_SEVERITY: str = Field(default="high", description="Lowest severity that raises an alert")

    @property
    def SERVER_URL(self) -> str:
        """Get the server URL"""
        return f"http://{self.HOST if self.HOST != '0.0.0.0' else 'localhost'}:{self.PORT}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env file


APP_VERSION = "1.0.0"

# Global settings instance
settings = Settings()
