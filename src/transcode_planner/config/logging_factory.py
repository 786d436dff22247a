"""Logging configuration factory.

Merges the global CLI logging options into the configured LoggingConfig.
"""

from __future__ import annotations

from pathlib import Path

from transcode_planner.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Build LoggingConfig from a base config and CLI overrides.

    Args:
        base: Logging configuration from file and environment.
        level: Override log level, None keeps base.level.
        file: Override log file path, None keeps base.file.
        format: Override log format ("text" or "json"), None keeps base.format.
        include_stderr: Override stderr inclusion, None keeps the base value.

    Returns:
        New LoggingConfig. Invalid values raise ValueError from
        LoggingConfig.__post_init__.
    """
    return LoggingConfig(
        level=level if level is not None else base.level,
        file=file if file is not None else base.file,
        format=format if format is not None else base.format,
        include_stderr=(
            include_stderr if include_stderr is not None else base.include_stderr
        ),
        max_bytes=base.max_bytes,
        backup_count=base.backup_count,
    )
