"""Custom logging formatters.

Provides JSONFormatter for structured log output.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# LogRecord attributes that never belong in the JSON context object
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "video_tag"}


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Keys: timestamp (ISO-8601 UTC), level, message, logger (unless root),
    context (extra attributes such as video_uuid) and exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted string.
        """
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.name and record.name != "root":
            entry["logger"] = record.name

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
            and not key.startswith("_")
            and value is not None
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
