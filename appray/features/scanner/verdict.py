"""Turn a final scan job snapshot into a build verdict."""

from typing import Optional

from appray.core import logs
from .models import JobStatus, Outcome, ScanJob, Verdict

RISK_SCORE_EXCEEDED = "risk score exceeds threshold"
WAIT_TIMEOUT_EXCEEDED = "wait timeout exceeded"
RISK_SCORE_MISSING = "risk score missing from finished scan"


def evaluate(
    job: ScanJob,
    risk_score_threshold: int,
    result_url: Optional[str],
    require_risk_score: bool = False,
) -> Verdict:
    """
    Decide pass/fail for a scan job.

    A finished job passes when its risk score is at or below the threshold.
    Failed and timed-out jobs always fail. Only finished jobs carry a JUnit
    report, so `fetch_report` is set on that path alone.

    A finished job without a risk score is scored as 0 unless
    `require_risk_score` is set, in which case it fails.
    """
    if job.status == JobStatus.FINISHED:
        if not job.risk_score_reported:
            logs.warning("Finished scan did not report a risk score", "verdict", {"job_id": job.id})
            if require_risk_score:
                return Verdict(
                    outcome=Outcome.FAIL,
                    reason=RISK_SCORE_MISSING,
                    result_url=result_url,
                    fetch_report=True,
                )

        if job.risk_score > risk_score_threshold:
            return Verdict(
                outcome=Outcome.FAIL,
                reason=f"{RISK_SCORE_EXCEEDED} ({job.risk_score} > {risk_score_threshold})",
                result_url=result_url,
                fetch_report=True,
            )
        return Verdict(
            outcome=Outcome.PASS,
            reason=f"risk score {job.risk_score} within threshold {risk_score_threshold}",
            result_url=result_url,
            fetch_report=True,
        )

    if job.status == JobStatus.FAILED:
        return Verdict(
            outcome=Outcome.FAIL,
            reason=job.failure_reason or "scan failed",
        )

    return Verdict(
        outcome=Outcome.FAIL,
        reason=WAIT_TIMEOUT_EXCEEDED,
        result_url=result_url,
    )
