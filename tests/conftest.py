"""
Shared fixtures for the App-Ray scanner tests.

- FakeAppRay serves the App-Ray REST API through httpx.MockTransport.
- FakeClock replaces time.monotonic/time.sleep so polling runs instantly.
"""

from typing import Dict, List, Optional

import httpx
import pytest
from pydantic import SecretStr

from appray.features.scanner.client import AppRayClient, Session
from appray.features.scanner.models import Credentials
from appray.features.scanner.poller import JobPoller

BASE_URL = "https://appray.test"
JOB_ID = "abc123"


def job_payload(status: str, **fields) -> dict:
    payload = {
        "status": status,
        "package": "com.example.app",
        "label": "Example",
        "version": "1.2.3",
        "platform": "android",
        "app_hash": "da39a3ee5e6b4b0d3255bfef95601890afd80709",
    }
    payload.update(fields)
    return payload


class FakeAppRay:
    """In-memory App-Ray API. Each job poll returns the next scripted payload."""

    def __init__(self, jobs: Optional[List[dict]] = None, job_id: str = JOB_ID) -> None:
        self.job_id = job_id
        self.jobs = list(jobs or [job_payload("finished", risk_score=0)])
        self.requests: List[httpx.Request] = []
        self.overrides: Dict[str, httpx.Response] = {}
        self.auth_status = 200
        self.role = "full-access"
        self.junit = b'<?xml version="1.0"?><testsuites name="App-Ray"/>'
        self.polls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.overrides:
            return self.overrides[path]

        if path == "/api/v1/authentication":
            if self.auth_status != 200:
                return httpx.Response(
                    self.auth_status, json={"title": "Denied", "detail": "nope"}
                )
            return httpx.Response(200, json={"access_token": "token-1"})
        if path == "/api/v1/user":
            return httpx.Response(
                200, json={"name": "CI Bot", "email": "ci@example.com", "role": self.role}
            )
        if path == "/api/v1/organization":
            return httpx.Response(200, json={"name": "Example Org"})
        if path == "/api/v1/jobs" and request.method == "POST":
            return httpx.Response(201, json=self.job_id)
        if path == f"/api/v1/jobs/{self.job_id}":
            payload = self.jobs[min(self.polls, len(self.jobs) - 1)]
            self.polls += 1
            return httpx.Response(200, json=payload)
        if path == f"/api/v1/jobs/{self.job_id}/junit":
            return httpx.Response(200, content=self.junit)

        return httpx.Response(404, json={"title": "Not Found", "detail": path})

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingClient(AppRayClient):
    """AppRayClient that remembers every session it opened."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.sessions: List[Session] = []

    def authenticate(self, *args, **kwargs) -> Session:
        session = super().authenticate(*args, **kwargs)
        self.sessions.append(session)
        return session


@pytest.fixture
def fake_appray() -> FakeAppRay:
    return FakeAppRay()


@pytest.fixture
def client(fake_appray: FakeAppRay) -> RecordingClient:
    return RecordingClient(transport=httpx.MockTransport(fake_appray.handler))


@pytest.fixture
def session(client: RecordingClient):
    session = client.authenticate(BASE_URL, "ci@example.com", "secret")
    yield session
    session.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def poller(client: RecordingClient, clock: FakeClock) -> JobPoller:
    return JobPoller(client, sleep=clock.sleep, clock=clock)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="ci@example.com", password=SecretStr("secret"))


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "app.apk").write_bytes(b"PK\x03\x04fake-apk")
    return tmp_path
