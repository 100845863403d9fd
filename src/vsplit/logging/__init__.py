"""Structured logging: text or JSON output, file rotation, job context."""

from vsplit.logging.config import configure_logging
from vsplit.logging.context import (
    JobContextFilter,
    get_job_context,
    job_context,
    new_job_id,
)
from vsplit.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_context",
    "job_context",
    "new_job_id",
]
