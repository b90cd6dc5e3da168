"""Data models for App-Ray scan orchestration."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, SecretStr


class Role(str, Enum):
    """App-Ray user roles."""

    FULL = "full-access"
    READONLY = "read-only"
    OBSERVER = "observer"
    UNKNOWN = "unknown"

    @classmethod
    def from_wire(cls, value: Optional[str]) -> "Role":
        for role in cls:
            if role.value == value and role is not cls.UNKNOWN:
                return role
        return cls.UNKNOWN


class JobStatus(str, Enum):
    """Scan job lifecycle states as reported by the service."""

    QUEUED = "queued"
    PROCESSING = "processing"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.FINISHED, JobStatus.FAILED)


class Outcome(str, Enum):
    """Build outcome produced by a scan run."""

    PASS = "PASS"
    FAIL = "FAIL"


class Credentials(BaseModel):
    """Username/password pair handed over by the credential store."""

    username: str
    password: SecretStr


class ProxyConfig(BaseModel):
    """Outbound HTTP proxy."""

    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


class Account(BaseModel):
    """The authenticated App-Ray user."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    role: Role


class ScanJob(BaseModel):
    """Client-side snapshot of a server-side scan job.

    Snapshots are immutable; a poll replaces the whole object.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    status: JobStatus
    progress_total: int = 0
    progress_finished: int = 0
    risk_score: int = 0
    risk_score_reported: bool = True
    package_name: str = ""
    label: str = ""
    version: str = ""
    platform: str = ""
    app_hash: str = ""
    failure_reason: str = ""

    @property
    def remaining(self) -> int:
        return self.progress_total - self.progress_finished


class Verdict(BaseModel):
    """Pass/fail decision derived from a final job snapshot."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    reason: str
    result_url: Optional[str] = None
    fetch_report: bool = False

    @property
    def passed(self) -> bool:
        return self.outcome == Outcome.PASS


class ScanRunResult(BaseModel):
    """Result record attached to a CI run."""

    application: str
    base_url: str
    job: ScanJob
    verdict: Verdict
    result_url: Optional[str] = None
    junit_path: Optional[str] = None
    account: Optional[Account] = None
    organization: Optional[str] = None
    timestamp: datetime
    duration_seconds: float


class ConnectionCheck(BaseModel):
    """Outcome of validating a service URL and credential pair."""

    ok: bool
    message: str
