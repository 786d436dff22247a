"""Structured logging for the planner.

Provides configurable logging with JSON format support, file rotation and
per-video context tagging.
"""

from transcode_planner.logging.config import configure_logging
from transcode_planner.logging.context import (
    VideoContextFilter,
    get_video_context,
    video_context,
)
from transcode_planner.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "VideoContextFilter",
    "configure_logging",
    "get_video_context",
    "video_context",
]
