"""HTTP client for the App-Ray REST API."""

from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Optional, Type, Union
from urllib.parse import quote

import httpx

from appray.core import (
    AuthenticationError,
    AuthFailureError,
    EndpointNotFoundError,
    InvalidCredentialsError,
    RemoteError,
    SessionClosedError,
    logs,
    settings,
)
from .models import Account, JobStatus, ProxyConfig, Role, ScanJob


def _proxy_url(proxy: Optional[ProxyConfig]) -> Optional[str]:
    return proxy.url if proxy else None


def _remote_error(response: httpx.Response, context: str) -> RemoteError:
    """Turn an error response into a RemoteError carrying title/detail."""
    status = response.status_code
    body = response.text
    try:
        payload = response.json()
    except ValueError as e:
        return RemoteError(
            f"Error({status}) {context}: {e}, body: {body}",
            status_code=status,
            body=body,
        )

    if not isinstance(payload, dict):
        payload = {}
    title = str(payload.get("title") or "")
    detail = str(payload.get("detail") or "")
    return RemoteError(
        f"Error({status}) {context}: {title} {detail}".rstrip(),
        status_code=status,
        title=title,
        detail=detail,
        body=body,
    )


class Session:
    """Authenticated handle to App-Ray, valid until closed.

    Owns one httpx.Client carrying the bearer token, base URL and proxy.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        proxy: Optional[ProxyConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = settings.REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url
        self.proxy = proxy
        self._token = token
        self._client: Optional[httpx.Client] = httpx.Client(
            base_url=base_url,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {token}",
            },
            proxy=_proxy_url(proxy),
            transport=transport,
            timeout=timeout,
        )

    @property
    def closed(self) -> bool:
        return self._client is None

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request to `{API_PREFIX}{path}`, wrapping transport failures."""
        if self._client is None:
            raise SessionClosedError()

        url = f"{settings.API_PREFIX}{path}"
        logs.debug(f"{method} {url}", "client")
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteError(
                f"Error communicating with App-Ray ({method} {url}): {e}"
            ) from e

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logs.debug("Session closed", "client", {"url": self.base_url})

    def __enter__(self) -> "Session":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


class AppRayClient:
    """Stateless gateway to the App-Ray API.

    Every call after authentication takes the Session it should run on, so a
    single client can serve independent runs without sharing state.
    """

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = settings.REQUEST_TIMEOUT,
        upload_timeout: float = settings.UPLOAD_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._timeout = timeout
        self._upload_timeout = upload_timeout

    def authenticate(
        self,
        base_url: str,
        username: str,
        password: str,
        proxy: Optional[ProxyConfig] = None,
    ) -> Session:
        """
        Exchange credentials for a bearer token and open a Session.

        Raises:
            InvalidCredentialsError: on HTTP 401
            EndpointNotFoundError: on HTTP 404 (wrong base URL)
            AuthFailureError: on any other non-success status
        """
        base_url = base_url.rstrip("/")
        url = f"{base_url}{settings.API_PREFIX}/authentication"

        logs.info("Authenticating", "client", {"url": base_url, "username": username})

        # The auth client is closed before the session client is opened.
        with httpx.Client(
            proxy=_proxy_url(proxy),
            transport=self._transport,
            timeout=self._timeout,
        ) as auth_client:
            try:
                response = auth_client.post(
                    url,
                    data={
                        "username": username,
                        "password": password,
                        "grant_type": "password",
                    },
                    headers={"Accept": "application/json"},
                )
            except httpx.HTTPError as e:
                raise AuthenticationError(
                    f"Unable to reach App-Ray authentication endpoint {url}: {e}",
                    status_code=0,
                ) from e

        if response.status_code == 401:
            logs.security("Invalid credentials", "client", {"username": username})
            raise InvalidCredentialsError(username)
        if response.status_code == 404:
            raise EndpointNotFoundError(url)
        if not response.is_success:
            raise AuthFailureError(response.status_code)

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(
                f"Authentication response has no access token: {e}",
                status_code=response.status_code,
            ) from e

        return Session(
            base_url,
            token,
            proxy=proxy,
            transport=self._transport,
            timeout=self._timeout,
        )

    def _get_json(self, session: Session, path: str) -> Dict[str, Any]:
        response = session.request("GET", path)
        if not response.is_success:
            raise _remote_error(response, "response")

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteError(
                f"Error({response.status_code}) response: {e}, body: {response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(payload, dict):
            raise RemoteError(
                f"Error({response.status_code}) response: expected a JSON object, "
                f"body: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return payload

    def get_account(self, session: Session) -> Account:
        payload = self._get_json(session, "/user")
        return Account(
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            role=Role.from_wire(payload.get("role")),
        )

    def get_organization(self, session: Session) -> str:
        payload = self._get_json(session, "/organization")
        return str(payload.get("name") or "")

    def submit_application(self, session: Session, file_path: Union[str, Path]) -> str:
        """Upload the application binary and return the new scan job id."""
        path = Path(file_path)
        logs.info("Submitting application", "client", {"file": str(path)})

        with path.open("rb") as fh:
            response = session.request(
                "POST",
                "/jobs",
                files={"app_file": (path.name, fh, "application/octet-stream")},
                timeout=self._upload_timeout,
            )

        if not response.is_success:
            raise _remote_error(response, "submitting application for scanning")

        job_id = self._decode_job_id(response)
        logs.info("Application submitted", "client", {"job_id": job_id})
        return job_id

    @staticmethod
    def _decode_job_id(response: httpx.Response) -> str:
        # The service answers with a JSON string literal, e.g. "abc123"
        try:
            value = response.json()
        except ValueError:
            value = response.text.strip()

        if isinstance(value, (str, int)) and str(value):
            return str(value)
        raise RemoteError(
            f"Error({response.status_code}) submitting application for scanning: "
            f"unexpected job id in response, body: {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    def get_job_details(self, session: Session, job_id: str) -> ScanJob:
        payload = self._get_json(session, f"/jobs/{quote(job_id, safe='')}")

        try:
            status = JobStatus(str(payload["status"]).lower())
            return ScanJob(
                id=job_id,
                status=status,
                progress_total=int(payload.get("progress_total") or 0),
                progress_finished=int(payload.get("progress_finished") or 0),
                risk_score=int(payload.get("risk_score") or 0),
                risk_score_reported=payload.get("risk_score") is not None,
                package_name=str(payload.get("package") or ""),
                label=str(payload.get("label") or ""),
                version=str(payload.get("version") or ""),
                platform=str(payload.get("platform") or ""),
                app_hash=str(payload.get("app_hash") or ""),
                failure_reason=str(payload.get("failure_reason") or ""),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise RemoteError(
                f"Unexpected job details for {job_id}: {e!r}",
                body=str(payload),
            ) from e

    def get_junit_report(self, session: Session, job_id: str) -> bytes:
        response = session.request("GET", f"/jobs/{quote(job_id, safe='')}/junit")
        if not response.is_success:
            raise _remote_error(response, "fetching JUnit results")
        return response.content
