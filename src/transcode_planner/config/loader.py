"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (TPLAN_*)
3. Config file (~/.tplan/config.toml)
4. Default values

Environment variables:
- TPLAN_CONFIG_PATH: Path to config file (overrides default location)
- TPLAN_DATA_DIR: Path to data directory (overrides ~/.tplan/)
- TPLAN_HLS_ENABLED / TPLAN_WEB_VIDEOS_ENABLED: Output kinds to produce
- TPLAN_SPLIT_AUDIO_AND_VIDEO: Produce HLS audio as its own rendition
- TPLAN_FPS_MAX / TPLAN_LIVE_FPS_MAX: Frame rate ceilings
- TPLAN_RESOLUTIONS / TPLAN_LIVE_RESOLUTIONS: Comma-separated ladders
- TPLAN_PROFILE: Encoding profile name
- TPLAN_VIDEO_ENCODERS / TPLAN_AUDIO_ENCODERS: Comma-separated try-lists
- TPLAN_FFMPEG_PATH / TPLAN_FFPROBE_PATH: Tool paths
- TPLAN_LOCK_DIR / TPLAN_LOCK_TIMEOUT: Per-video lock settings
- TPLAN_LOG_LEVEL / TPLAN_LOG_FILE / TPLAN_LOG_FORMAT: Logging
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any

from transcode_planner.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from transcode_planner.config.env import EnvReader
from transcode_planner.config.models import PlannerConfig
from transcode_planner.config.toml_parser import load_toml_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".tplan"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigError(Exception):
    """Configuration values could not be combined into a valid config."""


def get_default_config_path() -> Path:
    """Get the config file path, honouring TPLAN_CONFIG_PATH."""
    env_path = os.environ.get("TPLAN_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory holding config.toml and profiles/.

    Can be overridden by TPLAN_DATA_DIR environment variable.
    """
    env_path = os.environ.get("TPLAN_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_DIR


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file.

    Results are cached with mtime-based invalidation. Use
    clear_config_cache() to force a reload regardless of mtime.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise TomlParseError on parse failures.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        TomlParseError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        config = load_toml_file(path, strict=strict)
        _config_cache[path] = (config, current_mtime)
        return config


def clear_config_cache() -> None:
    """Drop every cached config file."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    cli_source: ConfigSource | None = None,
    profile_name: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> PlannerConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides TPLAN_CONFIG_PATH).
        cli_source: Values given on the command line.
        profile_name: Named YAML profile applied over file and env values.
            CLI values still win over the profile.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise TomlParseError on config file parse failures.

    Returns:
        PlannerConfig with merged configuration.

    Raises:
        TomlParseError: When strict=True and the config file cannot be parsed.
        ProfileError: If the named profile cannot be loaded.
        ConfigError: If a merged value fails validation.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    try:
        config = builder.build()
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if profile_name:
        from transcode_planner.config.profiles import (
            load_profile,
            merge_profile_with_config,
        )

        config = merge_profile_with_config(load_profile(profile_name), config)

    if cli_source is not None:
        try:
            config = apply_cli_overrides(config, cli_source)
        except ValueError as e:
            raise ConfigError(f"Invalid command line option: {e}") from e

    logger.debug("Effective configuration: %s", config)
    return config


def apply_cli_overrides(
    config: PlannerConfig, cli_source: ConfigSource
) -> PlannerConfig:
    """Apply the non-None values of a CLI source on top of a config."""
    transcoding_overrides = {
        key: value
        for key, value in (
            ("hls_enabled", cli_source.hls_enabled),
            ("web_videos_enabled", cli_source.web_videos_enabled),
            ("split_audio_and_video", cli_source.split_audio_and_video),
            ("fps_max", cli_source.fps_max),
            ("resolutions", cli_source.resolutions),
            ("profile", cli_source.profile),
            ("video_encoders", cli_source.video_encoders),
            ("audio_encoders", cli_source.audio_encoders),
        )
        if value is not None
    }
    tools_overrides = {
        key: value
        for key, value in (
            ("ffmpeg", cli_source.ffmpeg_path),
            ("ffprobe", cli_source.ffprobe_path),
        )
        if value is not None
    }
    return replace(
        config,
        transcoding=replace(config.transcoding, **transcoding_overrides),
        tools=replace(config.tools, **tools_overrides),
    )


def validate_config(config: PlannerConfig) -> list[str]:
    """Validate cross-field configuration constraints.

    Args:
        config: The configuration to validate.

    Returns:
        List of error strings. Empty list means configuration is valid.
    """
    errors: list[str] = []
    transcoding = config.transcoding

    if not transcoding.hls_enabled and not transcoding.web_videos_enabled:
        errors.append("Both HLS and web video outputs are disabled")

    if transcoding.split_audio_and_video and not transcoding.hls_enabled:
        errors.append("split_audio_and_video has no effect when HLS is disabled")

    if config.locks.directory is not None and not config.locks.directory.is_dir():
        errors.append(f"Lock directory does not exist: {config.locks.directory}")

    for tool in ("ffmpeg", "ffprobe"):
        path = config.get_tool_path(tool)
        if path is not None and not path.is_file():
            errors.append(f"Configured {tool} is not a file: {path}")

    return errors
