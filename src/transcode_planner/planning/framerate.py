"""Output frame rate computation.

Lower renditions of high frame rate inputs are downsampled to a standard
rate the input rate divides into, so frames are dropped evenly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from transcode_planner.domain.enums import TranscodingContext, VideoResolution

if TYPE_CHECKING:
    from transcode_planner.config.models import PlannerConfig

KEEP_ORIGIN_FPS_RESOLUTION_MIN = 720
HARD_MIN_FPS = 0.1
TRANSCODED_MIN_FPS = 1


class InvalidFrameRateError(ValueError):
    """Raised when an input frame rate is too low to transcode."""

    def __init__(self, fps: float, minimum: float) -> None:
        self.fps = fps
        self.minimum = minimum
        super().__init__(
            f"Cannot compute output FPS because {fps} is lower than {minimum}"
        )


@dataclass(frozen=True)
class FPSSettings:
    """Frame rate bounds derived from a context's maximum frame rate."""

    hard_min: float
    transcoded_min: float
    transcoded_max: float
    standard: tuple[float, ...]
    hd_standard: tuple[float, ...]
    average: float
    keep_origin_fps_resolution_min: int


def build_transcoding_fps_options(max_fps: float) -> FPSSettings:
    """Build the frame rate bounds for a maximum frame rate.

    Args:
        max_fps: Highest frame rate the context may produce.

    Returns:
        FPSSettings. The standard rates are 24, 25 and 30 where they fit
        under max_fps (max_fps alone otherwise); the HD rates are 50, 60 and
        max_fps itself where they fit.
    """
    standard = tuple(fps for fps in (24, 25, 30) if fps <= max_fps) or (max_fps,)
    hd_standard = tuple(fps for fps in (50, 60, max_fps) if fps <= max_fps)

    return FPSSettings(
        hard_min=HARD_MIN_FPS,
        transcoded_min=TRANSCODED_MIN_FPS,
        transcoded_max=max_fps,
        standard=standard,
        hd_standard=hd_standard,
        average=min(30, max_fps),
        keep_origin_fps_resolution_min=KEEP_ORIGIN_FPS_RESOLUTION_MIN,
    )


def get_closest_framerate(
    fps: float,
    settings: FPSSettings,
    kind: Literal["standard", "hd_standard"],
) -> float:
    """Pick the standard frame rate to downsample to.

    The biggest candidate dividing fps exactly wins. Otherwise the candidate
    leaving the smallest remainder is used (ties keep the bigger one).
    """
    candidates = sorted(getattr(settings, kind), reverse=True)

    for candidate in candidates:
        if fps % candidate == 0:
            return candidate

    return min(candidates, key=lambda candidate: fps % candidate)


def get_max_fps(config: PlannerConfig, context: TranscodingContext) -> int:
    """Maximum frame rate configured for a context."""
    if context is TranscodingContext.LIVE:
        return config.live.fps_max
    return config.transcoding.fps_max


def compute_output_fps(
    input_fps: float,
    resolution: int,
    is_origin_resolution: bool,
    context: TranscodingContext,
    config: PlannerConfig,
) -> float:
    """Compute the frame rate of one output rendition.

    Args:
        input_fps: Frame rate of the input.
        resolution: Output resolution (shorter side).
        is_origin_resolution: True for the rendition kept at input resolution.
        context: VOD or live, selecting the frame rate ceiling.
        config: Planner configuration.

    Returns:
        Output frame rate. Always 0 for the audio-only resolution.

    Raises:
        InvalidFrameRateError: If input_fps is below the hard minimum.
    """
    if resolution == VideoResolution.H_NOVIDEO:
        return 0

    settings = build_transcoding_fps_options(get_max_fps(config, context))
    fps = input_fps

    if (
        not is_origin_resolution
        and resolution < settings.keep_origin_fps_resolution_min
        and fps > settings.average
    ):
        fps = get_closest_framerate(fps, settings, "standard")

    if fps < settings.hard_min:
        raise InvalidFrameRateError(fps, settings.hard_min)

    fps = max(fps, settings.transcoded_min)

    if fps > settings.transcoded_max:
        fps = get_closest_framerate(fps, settings, "hd_standard")

    return fps
