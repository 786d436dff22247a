"""Configuration data models.

This module defines dataclasses for transcode planner configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

from transcode_planner.domain.enums import VideoResolution

VALID_RESOLUTIONS: frozenset[int] = frozenset(int(r) for r in VideoResolution)

DEFAULT_VOD_RESOLUTIONS: frozenset[int] = frozenset({360, 480, 720, 1080})
DEFAULT_LIVE_RESOLUTIONS: frozenset[int] = frozenset({360, 480, 720})


def _validate_resolutions(resolutions: frozenset[int], section: str) -> None:
    unknown = set(resolutions) - VALID_RESOLUTIONS
    if unknown:
        raise ValueError(
            f"{section}.resolutions contains unknown resolutions {sorted(unknown)}, "
            f"valid values are {sorted(VALID_RESOLUTIONS)}"
        )


@dataclass(frozen=True)
class TranscodingConfig:
    """On-demand transcoding policy."""

    # Produce segmented (HLS) renditions
    hls_enabled: bool = True

    # Produce flat web video files
    web_videos_enabled: bool = False

    # Produce HLS audio as its own rendition shared by every video rendition
    split_audio_and_video: bool = False

    # Frame rate ceiling for on-demand renditions
    fps_max: int = 60

    # Keep the input resolution as origin instead of the closest enabled one
    always_transcode_original_resolution: bool = True

    # Enabled ladder resolutions (0 is the audio-only rendition)
    resolutions: frozenset[int] = DEFAULT_VOD_RESOLUTIONS

    # Encoding profile; anything but "default" disables quick transcode
    profile: str = "default"

    # Encoder try-lists, None keeps the built-in order
    video_encoders: tuple[str, ...] | None = None
    audio_encoders: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        object.__setattr__(self, "resolutions", frozenset(self.resolutions))
        _validate_resolutions(self.resolutions, "transcoding")
        if self.fps_max < 1:
            raise ValueError(f"fps_max must be at least 1, got {self.fps_max}")
        if not self.profile:
            raise ValueError("profile must not be empty")


@dataclass(frozen=True)
class LiveTranscodingConfig:
    """Live transcoding policy."""

    fps_max: int = 30
    resolutions: frozenset[int] = DEFAULT_LIVE_RESOLUTIONS

    def __post_init__(self) -> None:
        """Validate configuration."""
        object.__setattr__(self, "resolutions", frozenset(self.resolutions))
        _validate_resolutions(self.resolutions, "live")
        if self.fps_max < 1:
            raise ValueError(f"fps_max must be at least 1, got {self.fps_max}")


@dataclass(frozen=True)
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass(frozen=True)
class LocksConfig:
    """Configuration for per-video file locks."""

    # Directory holding lock files; None keeps locks in process memory
    directory: Path | None = None

    # Seconds to wait for an in-process lock (None waits forever)
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass(frozen=True)
class PlannerConfig:
    """Main configuration container.

    Aggregates all configuration sections.
    """

    transcoding: TranscodingConfig = field(default_factory=TranscodingConfig)
    live: LiveTranscodingConfig = field(default_factory=LiveTranscodingConfig)
    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    locks: LocksConfig = field(default_factory=LocksConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def get_tool_path(self, tool_name: str) -> Path | None:
        """Get configured path for a tool.

        Args:
            tool_name: Name of the tool (ffmpeg, ffprobe).

        Returns:
            Configured path or None if not configured.
        """
        return getattr(self.tools, tool_name.lower(), None)


@dataclass(frozen=True)
class Profile:
    """Named transcoding profile loaded from YAML.

    Only the sections a profile sets override the base config.
    """

    name: str
    description: str | None = None
    transcoding: TranscodingConfig | None = None
    live: LiveTranscodingConfig | None = None
