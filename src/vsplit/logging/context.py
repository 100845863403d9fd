"""Job context for structured logging.

Each split runs inside job_context(), which tags every log record emitted
on that thread with the job id and input file.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_input_file: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "input_file", default=None
)


def new_job_id() -> str:
    """Return a short random job identifier."""
    return uuid.uuid4().hex[:8]


def get_job_context() -> tuple[str | None, str | None]:
    """Return (job_id, input_file) for the current context."""
    return _job_id.get(), _input_file.get()


@contextmanager
def job_context(
    input_file: Path | str | None = None,
    job_id: str | None = None,
) -> Generator[str, None, None]:
    """Tag log records with a job id and input file for the duration.

    Args:
        input_file: File being processed.
        job_id: Identifier to use. A new one is generated if None.

    Yields:
        The job id in effect.

    Example:
        with job_context("/media/in.mp4") as job_id:
            logger.info("Splitting")  # carries job_id and input_file
    """
    job_id = job_id or new_job_id()
    job_token = _job_id.set(job_id)
    file_token = _input_file.set(str(input_file) if input_file is not None else None)
    try:
        yield job_id
    finally:
        _input_file.reset(file_token)
        _job_id.reset(job_token)


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and input_file for JSON output and a compact job_tag
    ("[3f2a9c1e] ") for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        job_id, input_file = get_job_context()
        record.job_id = job_id
        record.input_file = input_file
        record.job_tag = f"[{job_id}] " if job_id else ""
        return True
