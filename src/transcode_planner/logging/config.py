"""Logging setup for the planner.

Provides configure_logging() to set up the root logger from LoggingConfig.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from transcode_planner.logging.context import VideoContextFilter
from transcode_planner.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from transcode_planner.config.models import LoggingConfig

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s - %(video_tag)s%(name)s - %(levelname)s - %(message)s"


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")


def configure_logging(config: LoggingConfig) -> None:
    """Configure the root logger from LoggingConfig.

    Replaces any existing root handlers. Logs go to a rotating file when one
    is configured, and to stderr when include_stderr is set or the file
    cannot be opened.

    Args:
        config: Logging configuration.
    """
    level = _LEVELS.get(config.level.casefold(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = _build_formatter(config.format)
    context_filter = VideoContextFilter()
    handlers: list[logging.Handler] = []

    if config.file:
        file_path = Path(config.file).expanduser()
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    file_path,
                    maxBytes=config.max_bytes,
                    backupCount=config.backup_count,
                    encoding="utf-8",
                )
            )
        except OSError as e:
            sys.stderr.write(f"Warning: Could not open log file {file_path}: {e}\n")

    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)
