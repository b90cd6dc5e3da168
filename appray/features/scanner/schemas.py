"""Input schemas for a scan run."""

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from appray.core import settings
from .models import Credentials, ProxyConfig


class ScanRequest(BaseModel):
    """Everything the CI host hands to one orchestration run."""

    base_url: str = Field(default=settings.URL, description="App-Ray service URL")
    application_path: str = Field(
        ..., description="Application binary, relative to the workspace"
    )
    workspace: Path = Field(default_factory=Path.cwd)
    credentials: Optional[Credentials] = None
    wait_timeout: int = Field(default=settings.WAIT_TIMEOUT, ge=0)
    risk_score_threshold: int = settings.RISK_SCORE_THRESHOLD
    require_risk_score: bool = False
    proxy: Optional[ProxyConfig] = None
    junit_file: str = settings.JUNIT_FILE

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format and scheme; empty is reported by the orchestrator."""
        v = v.strip()
        if not v:
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError("URL must use http or https scheme")
        if not parsed.netloc:
            raise ValueError("Invalid URL format - missing host")
        return v.rstrip("/")

    @property
    def application(self) -> Path:
        """Application path resolved against the workspace."""
        return self.workspace / self.application_path
