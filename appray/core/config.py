"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from APPRAY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APPRAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "appray-ci"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Remote service
    URL: str = "https://demo.app-ray.co"
    API_PREFIX: str = "/api/v1"
    USERNAME: Optional[str] = None
    PASSWORD: Optional[SecretStr] = None
    PROXY_HOST: Optional[str] = None
    PROXY_PORT: Optional[int] = None
    REQUEST_TIMEOUT: int = 60
    UPLOAD_TIMEOUT: int = 600

    # Scan policy
    WAIT_TIMEOUT: int = Field(default=10, description="Minutes to wait for a scan")
    RISK_SCORE_THRESHOLD: int = 30
    JUNIT_FILE: str = "appray.junit.xml"

    # Poll intervals (seconds)
    POLL_QUEUED_INTERVAL: float = 20
    POLL_PROCESSING_INTERVAL: float = 10
    POLL_FINISHING_INTERVAL: float = 5

    @property
    def log_level(self) -> str:
        """Effective log level, forced to DEBUG in debug mode."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
