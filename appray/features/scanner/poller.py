"""Poll a scan job until it reaches a terminal status or the deadline passes."""

import time
from typing import Callable, Optional

from appray.core import logs, settings
from .client import AppRayClient, Session
from .models import JobStatus, ScanJob


class JobPoller:
    """Drives the queued -> processing -> finished/failed loop.

    The deadline is checked before each sleep, so a run overshoots the
    timeout by at most one interval. Remote errors are not retried.
    """

    def __init__(
        self,
        client: AppRayClient,
        queued_interval: float = settings.POLL_QUEUED_INTERVAL,
        processing_interval: float = settings.POLL_PROCESSING_INTERVAL,
        finishing_interval: float = settings.POLL_FINISHING_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.queued_interval = queued_interval
        self.processing_interval = processing_interval
        self.finishing_interval = finishing_interval
        self._sleep = sleep
        self._clock = clock

    def next_interval(self, job: ScanJob) -> Optional[float]:
        """Seconds to wait before the next poll, or None once terminal."""
        if job.status == JobStatus.QUEUED:
            return self.queued_interval
        if job.status == JobStatus.PROCESSING:
            if job.remaining > 1:
                return self.processing_interval
            return self.finishing_interval
        return None

    def wait(
        self,
        session: Session,
        job_id: str,
        timeout_minutes: float,
        on_progress: Optional[Callable[[ScanJob], None]] = None,
        job: Optional[ScanJob] = None,
    ) -> ScanJob:
        """
        Poll until the job is terminal or `timeout_minutes` elapse.

        Args:
            session: Authenticated session
            job_id: Scan job to follow
            timeout_minutes: Overall deadline for the loop
            on_progress: Called with every non-terminal snapshot
            job: Snapshot already fetched by the caller, used as the first poll

        Returns:
            The first terminal snapshot, or the last snapshot fetched before
            the deadline (which may still be queued or processing).
        """
        deadline = self._clock() + timeout_minutes * 60
        if job is None:
            job = self.client.get_job_details(session, job_id)

        while self._clock() < deadline:
            interval = self.next_interval(job)
            if interval is None:
                break

            if on_progress:
                on_progress(job)
            logs.debug(
                "Job not finished yet",
                "poller",
                {
                    "job_id": job_id,
                    "status": job.status.value,
                    "progress": f"{job.progress_finished}/{job.progress_total}",
                    "sleep": interval,
                },
            )

            self._sleep(interval)
            job = self.client.get_job_details(session, job_id)

        if not job.status.is_terminal:
            logs.warning(
                "Wait timeout exceeded",
                "poller",
                {"job_id": job_id, "status": job.status.value, "timeout": timeout_minutes},
            )
        return job
