"""Tests for the job polling state machine."""

import httpx
import pytest

from appray.core import RemoteError
from appray.features.scanner.models import JobStatus, ScanJob

from .conftest import JOB_ID, job_payload


def _job(status: JobStatus, **fields) -> ScanJob:
    return ScanJob(id=JOB_ID, status=status, **fields)


@pytest.mark.parametrize(
    "job, interval",
    [
        (_job(JobStatus.QUEUED), 20),
        (_job(JobStatus.PROCESSING, progress_total=10, progress_finished=2), 10),
        (_job(JobStatus.PROCESSING, progress_total=10, progress_finished=9), 5),
        (_job(JobStatus.PROCESSING), 5),
        (_job(JobStatus.FINISHED), None),
        (_job(JobStatus.FAILED), None),
    ],
)
def test_next_interval(poller, job, interval):
    assert poller.next_interval(job) == interval


def test_wait_returns_first_terminal_snapshot(session, poller, fake_appray, clock):
    fake_appray.jobs = [
        job_payload("queued"),
        job_payload("processing", progress_total=10, progress_finished=3),
        job_payload("processing", progress_total=10, progress_finished=9),
        job_payload("finished", risk_score=20),
        job_payload("failed", failure_reason="should never be seen"),
    ]

    job = poller.wait(session, JOB_ID, timeout_minutes=10)

    assert job.status == JobStatus.FINISHED
    assert job.risk_score == 20
    assert fake_appray.polls == 4
    assert clock.sleeps == [20, 10, 5]


def test_wait_uses_snapshot_from_caller(session, poller, fake_appray, clock):
    fake_appray.jobs = [job_payload("finished", risk_score=1)]
    first = ScanJob(id=JOB_ID, status=JobStatus.QUEUED)

    job = poller.wait(session, JOB_ID, timeout_minutes=10, job=first)

    assert job.status == JobStatus.FINISHED
    assert fake_appray.polls == 1
    assert clock.sleeps == [20]


def test_wait_reports_progress(session, poller, fake_appray):
    fake_appray.jobs = [job_payload("queued"), job_payload("failed", failure_reason="bad apk")]
    seen = []

    job = poller.wait(session, JOB_ID, timeout_minutes=10, on_progress=seen.append)

    assert job.status == JobStatus.FAILED
    assert [j.status for j in seen] == [JobStatus.QUEUED]


def test_wait_times_out_with_last_snapshot(session, poller, fake_appray, clock):
    fake_appray.jobs = [job_payload("processing", progress_total=10, progress_finished=2)]

    job = poller.wait(session, JOB_ID, timeout_minutes=1)

    assert job.status == JobStatus.PROCESSING
    assert clock.now >= 60
    assert clock.now <= 60 + poller.processing_interval
    assert fake_appray.polls == len(clock.sleeps) + 1


def test_wait_with_zero_timeout_polls_once(session, poller, fake_appray, clock):
    fake_appray.jobs = [job_payload("queued")]

    job = poller.wait(session, JOB_ID, timeout_minutes=0)

    assert job.status == JobStatus.QUEUED
    assert fake_appray.polls == 1
    assert clock.sleeps == []


def test_wait_propagates_remote_errors(session, poller, fake_appray, clock):
    fake_appray.jobs = [job_payload("queued")]
    seen = []

    def on_progress(job):
        seen.append(job)
        fake_appray.overrides[f"/api/v1/jobs/{JOB_ID}"] = httpx.Response(
            500, json={"title": "Internal Server Error", "detail": "boom"}
        )

    with pytest.raises(RemoteError) as excinfo:
        poller.wait(session, JOB_ID, timeout_minutes=10, on_progress=on_progress)

    assert excinfo.value.status_code == 500
    assert len(seen) == 1
    assert clock.sleeps == [20]
