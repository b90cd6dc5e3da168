"""Tests for the verdict evaluator."""

import pytest

from appray.features.scanner.models import JobStatus, Outcome, ScanJob
from appray.features.scanner.verdict import (
    RISK_SCORE_EXCEEDED,
    RISK_SCORE_MISSING,
    WAIT_TIMEOUT_EXCEEDED,
    evaluate,
)

RESULT_URL = "https://appray.test/scan-details/abc123"


def _job(status: JobStatus, **fields) -> ScanJob:
    return ScanJob(id="abc123", status=status, **fields)


@pytest.mark.parametrize(
    "risk_score, threshold, outcome",
    [
        (0, 30, Outcome.PASS),
        (30, 30, Outcome.PASS),
        (31, 30, Outcome.FAIL),
        (45, 30, Outcome.FAIL),
        (100, 99, Outcome.FAIL),
        (5, 0, Outcome.FAIL),
        (0, 0, Outcome.PASS),
    ],
)
def test_finished_job_against_threshold(risk_score, threshold, outcome):
    verdict = evaluate(_job(JobStatus.FINISHED, risk_score=risk_score), threshold, RESULT_URL)

    assert verdict.outcome == outcome
    assert verdict.result_url == RESULT_URL
    assert verdict.fetch_report is True


def test_risk_score_failure_reason():
    verdict = evaluate(_job(JobStatus.FINISHED, risk_score=45), 30, RESULT_URL)

    assert RISK_SCORE_EXCEEDED in verdict.reason


@pytest.mark.parametrize("risk_score", [0, 30, 99])
def test_failed_job_always_fails(risk_score):
    job = _job(JobStatus.FAILED, risk_score=risk_score, failure_reason="Corrupt archive")

    verdict = evaluate(job, 30, RESULT_URL)

    assert verdict.outcome == Outcome.FAIL
    assert verdict.reason == "Corrupt archive"
    assert verdict.result_url is None
    assert verdict.fetch_report is False


@pytest.mark.parametrize("status", [JobStatus.QUEUED, JobStatus.PROCESSING])
def test_non_terminal_job_is_a_timeout(status):
    verdict = evaluate(_job(status), 30, RESULT_URL)

    assert verdict.outcome == Outcome.FAIL
    assert verdict.reason == WAIT_TIMEOUT_EXCEEDED
    assert verdict.result_url == RESULT_URL
    assert verdict.fetch_report is False


def test_missing_risk_score_scores_zero_by_default():
    job = _job(JobStatus.FINISHED, risk_score_reported=False)

    assert evaluate(job, 30, RESULT_URL).outcome == Outcome.PASS


def test_missing_risk_score_can_be_required():
    job = _job(JobStatus.FINISHED, risk_score_reported=False)

    verdict = evaluate(job, 30, RESULT_URL, require_risk_score=True)

    assert verdict.outcome == Outcome.FAIL
    assert verdict.reason == RISK_SCORE_MISSING
    assert verdict.fetch_report is True
