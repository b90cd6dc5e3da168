"""Scan orchestration - submits an application and turns the result into a verdict."""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Tuple

from appray.core import (
    AppException,
    ConfigurationError,
    ScanError,
    logs,
)
from .client import AppRayClient, Session
from .models import (
    ConnectionCheck,
    Credentials,
    JobStatus,
    ProxyConfig,
    Role,
    ScanJob,
    ScanRunResult,
)
from .poller import JobPoller
from .reporting.junit import write_junit_report
from .schemas import ScanRequest
from .verdict import evaluate


def result_url_for(base_url: str, job_id: str) -> str:
    return f"{base_url.rstrip('/')}/scan-details/{job_id}"


class ScanOrchestrator:
    """Runs one App-Ray scan for one CI build."""

    def __init__(
        self,
        client: Optional[AppRayClient] = None,
        poller: Optional[JobPoller] = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.client = client or AppRayClient()
        self.poller = poller or JobPoller(self.client)
        self._on_progress = on_progress

    def _emit(self, message: str) -> None:
        if self._on_progress:
            self._on_progress(message)

    def validate(self, request: ScanRequest) -> Tuple[Path, Credentials]:
        """
        Check run preconditions before anything touches the network.

        Returns:
            The resolved application path and the credentials to log in with

        Raises:
            ConfigurationError: missing credential, empty URL or missing file
        """
        if request.credentials is None:
            raise ConfigurationError("Credential is missing")
        if not request.base_url:
            raise ConfigurationError("Required App-Ray url is missing")

        application = request.application
        if not application.is_file():
            raise ConfigurationError(
                f"Application does not exist: {application}",
                details={"path": str(application)},
            )
        return application, request.credentials

    def _report_job(self, job: ScanJob) -> None:
        if job.status == JobStatus.QUEUED:
            self._emit("[WAIT] Application is queued for scanning")
        else:
            self._emit(
                f"[WAIT] Application is being scanned: "
                f"{job.progress_finished} / {job.progress_total}"
            )

    def run(self, request: ScanRequest) -> ScanRunResult:
        """
        Execute a full scan run.

        The session is closed on every exit path, including errors.

        Raises:
            ConfigurationError: preconditions not met
            AuthenticationError: login rejected
            RemoteError: any failed authenticated call
            ScanError: anything unexpected
        """
        application, credentials = self.validate(request)

        timestamp = datetime.now(timezone.utc)
        started = time.monotonic()

        self._emit(f"[INFO] App-Ray scanning application: {application}")

        try:
            with self.client.authenticate(
                request.base_url,
                credentials.username,
                credentials.password.get_secret_value(),
                proxy=request.proxy,
            ) as session:
                return self._scan(session, request, application, timestamp, started)
        except AppException as e:
            logs.error("Scan run failed", "orchestrator", exception=e)
            raise
        except Exception as e:
            logs.error("Unexpected error during scan run", "orchestrator", exception=e)
            raise ScanError(f"Exception: {e}") from e

    def _scan(
        self,
        session: Session,
        request: ScanRequest,
        application: Path,
        timestamp: datetime,
        started: float,
    ) -> ScanRunResult:
        account = self.client.get_account(session)
        organization = self.client.get_organization(session)
        self._emit(
            f"[INFO] App-Ray scanning on {session.base_url} -> "
            f"{account.name} ({account.email}) @ {organization}"
        )

        job_id = self.client.submit_application(session, application)
        job = self.client.get_job_details(session, job_id)
        result_url = result_url_for(session.base_url, job_id)

        self._emit(
            f"[INFO] App-Ray scanning {job.platform} application {job.package_name} "
            f"({job.label}) {job.version} (SHA1: {job.app_hash}), scan job ID: {job_id}"
        )
        self._emit(f"[INFO] App-Ray scan result details will be available at: {result_url}")

        job = self.poller.wait(
            session,
            job_id,
            request.wait_timeout,
            on_progress=self._report_job,
            job=job,
        )

        verdict = evaluate(
            job,
            request.risk_score_threshold,
            result_url,
            require_risk_score=request.require_risk_score,
        )

        junit_path = None
        if verdict.fetch_report:
            report = self.client.get_junit_report(session, job_id)
            junit_path = write_junit_report(request.workspace, report, request.junit_file)

        if job.status == JobStatus.FINISHED:
            if verdict.passed:
                self._emit(
                    f"[PASS] App-Ray scan finished, application below configured "
                    f"threshold, risk score: {job.risk_score}"
                )
            else:
                self._emit(f"[FAIL] App-Ray scan finished: {verdict.reason}")
        elif job.status == JobStatus.FAILED:
            self._emit(f"[FAIL] App-Ray scan failed: {verdict.reason}")
        else:
            self._emit(
                "[FAIL] App-Ray scan wait timeout exceeded, try to increase the wait timeout"
            )

        duration = time.monotonic() - started
        logs.info(
            "Scan run completed",
            "orchestrator",
            {
                "job_id": job_id,
                "status": job.status.value,
                "outcome": verdict.outcome.value,
                "duration": f"{duration:.2f}s",
            },
        )

        return ScanRunResult(
            application=str(application),
            base_url=session.base_url,
            job=job,
            verdict=verdict,
            result_url=verdict.result_url,
            junit_path=junit_path,
            account=account,
            organization=organization,
            timestamp=timestamp,
            duration_seconds=duration,
        )


def check_connection(
    base_url: str,
    credentials: Optional[Credentials],
    proxy: Optional[ProxyConfig] = None,
    client: Optional[AppRayClient] = None,
) -> ConnectionCheck:
    """
    Validate a service URL and credential pair.

    The account must hold the full-access role to submit scans.
    """
    if credentials is None:
        return ConnectionCheck(
            ok=False,
            message="Missing credential, maybe configured credential has been deleted or moved?",
        )
    if not base_url:
        return ConnectionCheck(ok=False, message="App-Ray url is required")

    client = client or AppRayClient()
    try:
        with client.authenticate(
            base_url,
            credentials.username,
            credentials.password.get_secret_value(),
            proxy=proxy,
        ) as session:
            account = client.get_account(session)
            organization = client.get_organization(session)
    except Exception as e:
        logs.error("Connection check failed", "check", exception=e)
        return ConnectionCheck(ok=False, message=f"Connection error: {e}")

    if account.role != Role.FULL:
        logs.security(
            "Account lacks full-access role",
            "check",
            {"username": credentials.username, "role": account.role.value},
        )
        return ConnectionCheck(
            ok=False,
            message=(
                f"User must have full-access role: {credentials.username} "
                f"current role: {account.role.value}"
            ),
        )

    return ConnectionCheck(
        ok=True,
        message=f"Successfully connected. {account.name} ({account.email}) @ {organization}",
    )
