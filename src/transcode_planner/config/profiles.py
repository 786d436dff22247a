"""Named transcoding profile management.

Profiles store alternative transcoding policies (for example a low-bandwidth
ladder or a split-audio HLS setup) in ~/.tplan/profiles/<name>.yaml and are
applied with the --profile flag.

Example profile:

    name: mobile
    description: Small ladder for mobile-first channels
    transcoding:
      resolutions: [0, 240, 360, 480]
      split_audio_and_video: true
      encoders:
        audio: [aac]
    live:
      fps_max: 25
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from transcode_planner.config.loader import ConfigError, get_data_dir
from transcode_planner.config.models import (
    DEFAULT_LIVE_RESOLUTIONS,
    DEFAULT_VOD_RESOLUTIONS,
    LiveTranscodingConfig,
    PlannerConfig,
    Profile,
    TranscodingConfig,
)

logger = logging.getLogger(__name__)

_PROFILE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


class ProfileError(ConfigError):
    """Error loading or validating a profile."""


class ProfileNotFoundError(ProfileError):
    """Profile does not exist."""


class EncodersModel(BaseModel):
    """Pydantic model for encoder try-lists."""

    model_config = ConfigDict(extra="forbid")

    video: list[str] | None = None
    audio: list[str] | None = None


class TranscodingSectionModel(BaseModel):
    """Pydantic model for the transcoding section of a profile."""

    model_config = ConfigDict(extra="forbid")

    hls_enabled: bool = True
    web_videos_enabled: bool = False
    split_audio_and_video: bool = False
    fps_max: int = 60
    always_transcode_original_resolution: bool = True
    resolutions: list[int] | None = None
    profile: str = "default"
    encoders: EncodersModel | None = None


class LiveSectionModel(BaseModel):
    """Pydantic model for the live section of a profile."""

    model_config = ConfigDict(extra="forbid")

    fps_max: int = 30
    resolutions: list[int] | None = None


class ProfileModel(BaseModel):
    """Pydantic model for a whole profile file."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str | None = None
    transcoding: TranscodingSectionModel | None = None
    live: LiveSectionModel | None = None


def get_profiles_directory() -> Path:
    """Get the profiles directory path.

    Returns:
        Path to ~/.tplan/profiles/ (or $TPLAN_DATA_DIR/profiles/).
    """
    return get_data_dir() / "profiles"


def list_profiles() -> list[str]:
    """List available profile names, sorted.

    Returns:
        List of profile names (without .yaml extension).
    """
    profiles_dir = get_profiles_directory()
    if not profiles_dir.exists():
        return []

    return sorted(
        p.stem
        for p in profiles_dir.glob("*.yaml")
        if p.is_file() and not p.name.startswith(".")
    )


def _to_transcoding_config(section: TranscodingSectionModel) -> TranscodingConfig:
    encoders = section.encoders or EncodersModel()
    return TranscodingConfig(
        hls_enabled=section.hls_enabled,
        web_videos_enabled=section.web_videos_enabled,
        split_audio_and_video=section.split_audio_and_video,
        fps_max=section.fps_max,
        always_transcode_original_resolution=(
            section.always_transcode_original_resolution
        ),
        resolutions=(
            frozenset(section.resolutions)
            if section.resolutions is not None
            else DEFAULT_VOD_RESOLUTIONS
        ),
        profile=section.profile,
        video_encoders=tuple(encoders.video) if encoders.video is not None else None,
        audio_encoders=tuple(encoders.audio) if encoders.audio is not None else None,
    )


def _to_live_config(section: LiveSectionModel) -> LiveTranscodingConfig:
    return LiveTranscodingConfig(
        fps_max=section.fps_max,
        resolutions=(
            frozenset(section.resolutions)
            if section.resolutions is not None
            else DEFAULT_LIVE_RESOLUTIONS
        ),
    )


def parse_profile(data: dict[str, Any], name: str) -> Profile:
    """Validate raw profile data and build a Profile.

    Args:
        data: Parsed YAML mapping.
        name: Profile name used when the data carries none.

    Returns:
        Validated Profile.

    Raises:
        ProfileError: If the data has unknown keys or invalid values.
    """
    try:
        model = ProfileModel.model_validate(data)
    except ValidationError as e:
        raise ProfileError(f"Invalid profile '{name}': {e}") from e

    try:
        transcoding = (
            _to_transcoding_config(model.transcoding) if model.transcoding else None
        )
        live = _to_live_config(model.live) if model.live else None
    except ValueError as e:
        raise ProfileError(f"Invalid profile '{name}': {e}") from e

    return Profile(
        name=model.name or name,
        description=model.description,
        transcoding=transcoding,
        live=live,
    )


def load_profile(name: str) -> Profile:
    """Load a profile by name.

    Args:
        name: Profile name (without .yaml extension).

    Returns:
        Loaded Profile dataclass.

    Raises:
        ProfileNotFoundError: If profile doesn't exist.
        ProfileError: If profile is invalid.
    """
    if not _PROFILE_NAME_PATTERN.match(name):
        raise ProfileError(f"Profile name must be alphanumeric (with - or _): {name}")

    profile_path = get_profiles_directory() / f"{name}.yaml"
    if not profile_path.exists():
        raise ProfileNotFoundError(f"Profile not found: {name}")

    try:
        with open(profile_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid YAML in profile {name}: {e}") from e

    if not isinstance(data, dict):
        raise ProfileError(f"Profile {name} must be a mapping")

    logger.debug("Loaded profile %s from %s", name, profile_path)
    return parse_profile(data, name)


def merge_profile_with_config(profile: Profile, config: PlannerConfig) -> PlannerConfig:
    """Merge profile settings into a base config.

    A section present in the profile replaces the base section as a whole.
    CLI flags (applied later) override the profile.

    Args:
        profile: Profile to apply.
        config: Base configuration.

    Returns:
        New PlannerConfig with profile settings merged in.
    """
    overrides: dict[str, Any] = {}
    if profile.transcoding:
        overrides["transcoding"] = profile.transcoding
    if profile.live:
        overrides["live"] = profile.live
    return replace(config, **overrides)
