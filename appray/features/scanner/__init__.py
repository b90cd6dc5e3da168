"""Scanner feature module for the App-Ray CI scanner."""

from .client import AppRayClient, Session
from .models import (
    Account,
    ConnectionCheck,
    Credentials,
    JobStatus,
    Outcome,
    ProxyConfig,
    Role,
    ScanJob,
    ScanRunResult,
    Verdict,
)
from .poller import JobPoller
from .schemas import ScanRequest
from .services import ScanOrchestrator, check_connection
from .verdict import evaluate

__all__ = [
    "AppRayClient",
    "Session",
    "Account",
    "ConnectionCheck",
    "Credentials",
    "JobStatus",
    "Outcome",
    "ProxyConfig",
    "Role",
    "ScanJob",
    "ScanRunResult",
    "Verdict",
    "JobPoller",
    "ScanRequest",
    "ScanOrchestrator",
    "check_connection",
    "evaluate",
]
