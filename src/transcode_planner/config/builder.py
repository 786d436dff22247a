"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building PlannerConfig by composing
multiple configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from transcode_planner.config.env import EnvReader
from transcode_planner.config.models import (
    DEFAULT_LIVE_RESOLUTIONS,
    DEFAULT_VOD_RESOLUTIONS,
    LiveTranscodingConfig,
    LocksConfig,
    LoggingConfig,
    PlannerConfig,
    ToolPathsConfig,
    TranscodingConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Transcoding policy
    hls_enabled: bool | None = None
    web_videos_enabled: bool | None = None
    split_audio_and_video: bool | None = None
    fps_max: int | None = None
    always_transcode_original_resolution: bool | None = None
    resolutions: frozenset[int] | None = None
    profile: str | None = None
    video_encoders: tuple[str, ...] | None = None
    audio_encoders: tuple[str, ...] | None = None

    # Live policy
    live_fps_max: int | None = None
    live_resolutions: frozenset[int] | None = None

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Locks
    locks_directory: Path | None = None
    locks_timeout_seconds: float | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds PlannerConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config), source_name="file")
        builder.apply(source_from_env(reader), source_name="env")
        builder.apply(cli_source, source_name="cli")
        config = builder.build()
    """

    def __init__(self) -> None:
        """Initialize the builder with no values set."""
        self._values: dict[str, Any] = {}
        self._sources: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
            source_name: Label recorded for each value this source sets.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._sources[field_obj.name] = source_name

    def source_of(self, key: str) -> str:
        """Return which source set a value ("default" if none did)."""
        return self._sources.get(key, "default")

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> PlannerConfig:
        """Build the final PlannerConfig with defaults for unset values.

        Raises:
            ValueError: If a section fails validation.
        """
        transcoding = TranscodingConfig(
            hls_enabled=self._get("hls_enabled", True),
            web_videos_enabled=self._get("web_videos_enabled", False),
            split_audio_and_video=self._get("split_audio_and_video", False),
            fps_max=self._get("fps_max", 60),
            always_transcode_original_resolution=self._get(
                "always_transcode_original_resolution", True
            ),
            resolutions=self._get("resolutions", DEFAULT_VOD_RESOLUTIONS),
            profile=self._get("profile", "default"),
            video_encoders=self._get("video_encoders", None),
            audio_encoders=self._get("audio_encoders", None),
        )

        live = LiveTranscodingConfig(
            fps_max=self._get("live_fps_max", 30),
            resolutions=self._get("live_resolutions", DEFAULT_LIVE_RESOLUTIONS),
        )

        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
        )

        locks = LocksConfig(
            directory=self._get("locks_directory", None),
            timeout_seconds=self._get("locks_timeout_seconds", None),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return PlannerConfig(
            transcoding=transcoding,
            live=live,
            tools=tools,
            locks=locks,
            logging=logging_config,
        )


def _optional_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def _optional_tuple(value: list[str] | None) -> tuple[str, ...] | None:
    return tuple(value) if value is not None else None


def _optional_int_set(value: list[int] | None) -> frozenset[int] | None:
    return frozenset(value) if value is not None else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from parsed TOML config file.

    Expected layout:

        [transcoding]
        hls_enabled = true
        resolutions = [360, 480, 720, 1080]

        [transcoding.encoders]
        video = ["libx265", "libx264"]

        [live]
        fps_max = 30

    Args:
        file_config: Parsed configuration dictionary from TOML file.

    Returns:
        ConfigSource with values from the config file.
    """
    transcoding = file_config.get("transcoding", {})
    encoders = transcoding.get("encoders", {})
    live = file_config.get("live", {})
    tools = file_config.get("tools", {})
    locks = file_config.get("locks", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        # Transcoding
        hls_enabled=transcoding.get("hls_enabled"),
        web_videos_enabled=transcoding.get("web_videos_enabled"),
        split_audio_and_video=transcoding.get("split_audio_and_video"),
        fps_max=transcoding.get("fps_max"),
        always_transcode_original_resolution=transcoding.get(
            "always_transcode_original_resolution"
        ),
        resolutions=_optional_int_set(transcoding.get("resolutions")),
        profile=transcoding.get("profile"),
        video_encoders=_optional_tuple(encoders.get("video")),
        audio_encoders=_optional_tuple(encoders.get("audio")),
        # Live
        live_fps_max=live.get("fps_max"),
        live_resolutions=_optional_int_set(live.get("resolutions")),
        # Tools
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        # Locks
        locks_directory=_optional_path(locks.get("directory")),
        locks_timeout_seconds=locks.get("timeout_seconds"),
        # Logging
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from TPLAN_* environment variables.

    Args:
        reader: EnvReader instance for reading environment variables.

    Returns:
        ConfigSource with values from environment variables.
    """
    video_encoders = reader.get_str_list("TPLAN_VIDEO_ENCODERS")
    audio_encoders = reader.get_str_list("TPLAN_AUDIO_ENCODERS")

    return ConfigSource(
        # Transcoding
        hls_enabled=reader.get_bool("TPLAN_HLS_ENABLED"),
        web_videos_enabled=reader.get_bool("TPLAN_WEB_VIDEOS_ENABLED"),
        split_audio_and_video=reader.get_bool("TPLAN_SPLIT_AUDIO_AND_VIDEO"),
        fps_max=reader.get_int("TPLAN_FPS_MAX"),
        always_transcode_original_resolution=reader.get_bool(
            "TPLAN_ALWAYS_TRANSCODE_ORIGINAL_RESOLUTION"
        ),
        resolutions=reader.get_int_set("TPLAN_RESOLUTIONS"),
        profile=reader.get_str("TPLAN_PROFILE"),
        video_encoders=_optional_tuple(video_encoders),
        audio_encoders=_optional_tuple(audio_encoders),
        # Live
        live_fps_max=reader.get_int("TPLAN_LIVE_FPS_MAX"),
        live_resolutions=reader.get_int_set("TPLAN_LIVE_RESOLUTIONS"),
        # Tools
        ffmpeg_path=reader.get_path("TPLAN_FFMPEG_PATH", must_exist=True),
        ffprobe_path=reader.get_path("TPLAN_FFPROBE_PATH", must_exist=True),
        # Locks
        locks_directory=reader.get_path("TPLAN_LOCK_DIR"),
        locks_timeout_seconds=reader.get_float("TPLAN_LOCK_TIMEOUT"),
        # Logging
        logging_level=reader.get_str("TPLAN_LOG_LEVEL"),
        logging_file=reader.get_path("TPLAN_LOG_FILE"),
        logging_format=reader.get_str("TPLAN_LOG_FORMAT"),
    )
