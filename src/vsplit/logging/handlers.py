"""JSON log formatting.

Each record becomes one line of JSON:

    {"timestamp": "...", "level": "INFO", "message": "...",
     "logger": "vsplit.runner", "job_id": "3f2a9c1e",
     "input_file": "/media/in.mp4", "context": {"segment": 4}}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Fields copied to the top level of an entry when JobContextFilter set them
JOB_FIELDS = ("job_id", "input_file")

# Everything a bare LogRecord carries, plus what Formatter.format() and
# JobContextFilter add, is not user context
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName", "job_tag", *JOB_FIELDS}


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Attributes passed through ``extra=`` are collected under "context".
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name

        for field in JOB_FIELDS:
            value = getattr(record, field, None)
            if value:
                entry[field] = value

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
