"""Tests for logging config factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from transcode_planner.config.logging_factory import build_logging_config
from transcode_planner.config.models import LoggingConfig


class TestBuildLoggingConfig:
    """Tests for build_logging_config function."""

    def test_no_overrides_keeps_base(self) -> None:
        base = LoggingConfig(level="warning", format="json", max_bytes=1024)
        assert build_logging_config(base) == base

    def test_overrides(self) -> None:
        base = LoggingConfig()
        config = build_logging_config(
            base,
            level="debug",
            file=Path("/tmp/tplan.log"),
            format="json",
            include_stderr=True,
        )

        assert config.level == "debug"
        assert config.file == Path("/tmp/tplan.log")
        assert config.format == "json"
        assert config.include_stderr is True
        assert config.backup_count == base.backup_count

    def test_invalid_level(self) -> None:
        with pytest.raises(ValueError, match="level must be one of"):
            build_logging_config(LoggingConfig(), level="verbose")
