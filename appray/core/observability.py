"""Structured logging facade used across the scanner."""

import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import settings

LOGGER_NAME = "appray"


def _build_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    return logger


class Logs:
    """Thin wrapper that tags every record with a source and context data.

    Usage:
        logs.info("Job submitted", "client", {"job_id": job_id})
        logs.error("Scan failed", "orchestrator", exception=e)
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @staticmethod
    def _format(message: str, source: str, data: Optional[Dict[str, Any]]) -> str:
        text = f"[{source}] {message}"
        if data:
            pairs = " ".join(f"{key}={value}" for key, value in data.items())
            text = f"{text} {pairs}"
        return text

    def debug(
        self, message: str, source: str = "app", data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.debug(self._format(message, source, data))

    def info(
        self, message: str, source: str = "app", data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.info(self._format(message, source, data))

    def warning(
        self, message: str, source: str = "app", data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.warning(self._format(message, source, data))

    def error(
        self,
        message: str,
        source: str = "app",
        data: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        if exception is not None:
            data = {**(data or {}), "error": f"{type(exception).__name__}: {exception}"}
        self._logger.error(
            self._format(message, source, data),
            exc_info=exception if settings.DEBUG else None,
        )

    def security(
        self, message: str, source: str = "security", data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Security-relevant events (credential and role problems)."""
        self._logger.warning(self._format(f"SECURITY: {message}", source, data))

    def set_level(self, level: str) -> None:
        self._logger.setLevel(level.upper())


logs = Logs(_build_logger())
