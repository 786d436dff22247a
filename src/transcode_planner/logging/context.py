"""Per-video context for structured logging.

A planning invocation runs inside video_context(uuid) so every record
emitted while the video is locked, probed and planned carries its uuid.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_video_uuid: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "video_uuid", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


def get_video_context() -> tuple[str | None, str | None]:
    """Get the current (video_uuid, operation) pair; either may be None."""
    return _video_uuid.get(), _operation.get()


@contextmanager
def video_context(
    video_uuid: str, operation: str | None = None
) -> Generator[None, None, None]:
    """Context manager binding a video uuid to log records.

    The previous context is restored on exit, so contexts nest.

    Args:
        video_uuid: Identifier of the video being planned.
        operation: Short name of the planning operation, e.g. "plan".

    Example:
        with video_context(video.uuid, "plan"):
            logger.info("Probing input")  # Logged with [V:<uuid>]
    """
    uuid_token = _video_uuid.set(video_uuid)
    operation_token = _operation.set(operation)
    try:
        yield
    finally:
        _operation.reset(operation_token)
        _video_uuid.reset(uuid_token)


class VideoContextFilter(logging.Filter):
    """Logging filter that injects the video context into log records.

    Adds video_uuid and operation attributes for JSON output and a compact
    video_tag ("[V:<uuid>] " or empty) for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Enrich the record; never filters it out."""
        video_uuid, operation = get_video_context()

        record.video_uuid = video_uuid
        record.operation = operation

        if video_uuid:
            if operation:
                record.video_tag = f"[V:{video_uuid}:{operation}] "
            else:
                record.video_tag = f"[V:{video_uuid}] "
        else:
            record.video_tag = ""

        return True
