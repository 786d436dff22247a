"""Resolution ladder planning."""

from __future__ import annotations

from collections.abc import Iterable

from transcode_planner.config.models import TranscodingConfig
from transcode_planner.domain.enums import VideoResolution


def to_even(value: int) -> int:
    """Round an odd resolution up; ffmpeg rejects odd frame sides."""
    return value + 1 if value % 2 else value


def compute_resolutions_to_transcode(
    input_resolution: int,
    has_audio: bool,
    include_input: bool,
    strict_lower: bool,
    enabled: Iterable[int],
) -> list[int]:
    """Compute the ladder of resolutions to produce from an input.

    Args:
        input_resolution: Shorter side of the input frame.
        has_audio: Whether the input carries audio. The audio-only
            resolution is dropped when it does not.
        include_input: Add the even-rounded input resolution.
        strict_lower: Exclude the input resolution itself.
        enabled: Configured resolutions.

    Returns:
        Distinct resolutions, highest first.
    """
    enabled_set = set(enabled)
    resolutions: set[int] = set()

    for resolution in VideoResolution:
        if resolution not in enabled_set:
            continue
        if resolution > input_resolution:
            continue
        if strict_lower and resolution == input_resolution:
            continue
        if resolution == VideoResolution.H_NOVIDEO and not has_audio:
            continue
        resolutions.add(int(resolution))

    if include_input:
        resolutions.add(to_even(input_resolution))

    return sorted(resolutions, reverse=True)


def build_original_file_resolution(
    input_resolution: int, config: TranscodingConfig
) -> int:
    """Resolution the origin rendition is produced at.

    With always_transcode_original_resolution the even-rounded input is
    kept. Otherwise the input snaps down to the greatest enabled resolution
    it covers, falling back to the even-rounded input when none is enabled.
    The audio-only resolution never serves as origin.
    """
    if config.always_transcode_original_resolution:
        return to_even(input_resolution)

    resolutions = compute_resolutions_to_transcode(
        input_resolution,
        has_audio=False,
        include_input=False,
        strict_lower=False,
        enabled=config.resolutions,
    )
    if not resolutions:
        return to_even(input_resolution)
    return resolutions[0]
