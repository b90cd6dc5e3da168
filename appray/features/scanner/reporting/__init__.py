"""Reporting modules for scan results."""

from .html import generate_html_report
from .junit import write_junit_report
from .console import (
    console,
    show_error,
    show_job_table,
    show_progress,
    show_summary,
)

__all__ = [
    "generate_html_report",
    "write_junit_report",
    "console",
    "show_error",
    "show_job_table",
    "show_progress",
    "show_summary",
]
