"""Core utilities for the App-Ray CI scanner."""

from .config import settings
from .exceptions import (
    AppException,
    AuthenticationError,
    AuthFailureError,
    ConfigurationError,
    EndpointNotFoundError,
    InvalidCredentialsError,
    RemoteError,
    ScanError,
    SessionClosedError,
)
from .observability import logs

__all__ = [
    "settings",
    "logs",
    "AppException",
    "AuthenticationError",
    "AuthFailureError",
    "ConfigurationError",
    "EndpointNotFoundError",
    "InvalidCredentialsError",
    "RemoteError",
    "ScanError",
    "SessionClosedError",
]
