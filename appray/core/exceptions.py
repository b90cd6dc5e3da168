"""Custom exception hierarchy for the App-Ray CI scanner."""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(AppException):
    """Raised when the run is misconfigured (credential, URL, application)."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppException):
    """Raised when authentication against App-Ray fails."""


class InvalidCredentialsError(AuthenticationError):
    """The service rejected the username/password pair."""

    def __init__(self, username: str) -> None:
        super().__init__(
            f"Authentication failure ({username})",
            status_code=401,
            details={"username": username},
        )


class EndpointNotFoundError(AuthenticationError):
    """The authentication endpoint does not exist, usually a bad base URL."""

    def __init__(self, url: str) -> None:
        super().__init__(
            f"Authentication endpoint is missing, specify a valid URL; {url}",
            status_code=404,
            details={"url": url},
        )


class AuthFailureError(AuthenticationError):
    """Any other non-success authentication status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(
            f"Authentication failure, status code: {status_code}",
            status_code=status_code,
        )


class RemoteError(AppException):
    """Raised when an authenticated call returns an error or unreadable body."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        title: str = "",
        detail: str = "",
        body: Optional[str] = None,
    ) -> None:
        self.title = title
        self.detail = detail
        self.body = body
        super().__init__(
            message,
            status_code=status_code,
            details={"title": title, "detail": detail},
        )


class SessionClosedError(RemoteError):
    """Raised when a closed session is used."""

    def __init__(self) -> None:
        super().__init__("App-Ray session is closed")


class ScanError(AppException):
    """Raised when a scan run fails for an unexpected reason."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=500, details=details)
