"""Theoretical bitrate model.

Bitrates are derived from a bits-per-pixel budget per resolution tier, so a
1080p30 16:9 stream gets 1080 * 1920 * 30 * bpp bits per second. Three
budgets are kept: a floor below which quality collapses, an average used as
the encoding target and a ceiling used to decide whether an input stream is
already reasonable enough to be copied.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType

from transcode_planner.domain.enums import VideoResolution

# Highest tier first: a resolution uses the budget of the greatest tier <= it
RESOLUTION_TIERS: tuple[int, ...] = tuple(
    sorted((int(r) for r in VideoResolution), reverse=True)
)

MIN_BIT_PER_PIXEL: Mapping[int, float] = MappingProxyType(
    {
        VideoResolution.H_NOVIDEO: 0,
        VideoResolution.H_144P: 0.02,
        VideoResolution.H_240P: 0.02,
        VideoResolution.H_360P: 0.02,
        VideoResolution.H_480P: 0.02,
        VideoResolution.H_720P: 0.02,
        VideoResolution.H_1080P: 0.02,
        VideoResolution.H_1440P: 0.02,
        VideoResolution.H_4K: 0.02,
    }
)

AVERAGE_BIT_PER_PIXEL: Mapping[int, float] = MappingProxyType(
    {
        VideoResolution.H_NOVIDEO: 0,
        VideoResolution.H_144P: 0.19,
        VideoResolution.H_240P: 0.17,
        VideoResolution.H_360P: 0.15,
        VideoResolution.H_480P: 0.12,
        VideoResolution.H_720P: 0.11,
        VideoResolution.H_1080P: 0.10,
        VideoResolution.H_1440P: 0.09,
        VideoResolution.H_4K: 0.08,
    }
)

MAX_BIT_PER_PIXEL: Mapping[int, float] = MappingProxyType(
    {
        VideoResolution.H_NOVIDEO: 0,
        VideoResolution.H_144P: 0.32,
        VideoResolution.H_240P: 0.29,
        VideoResolution.H_360P: 0.26,
        VideoResolution.H_480P: 0.22,
        VideoResolution.H_720P: 0.19,
        VideoResolution.H_1080P: 0.17,
        VideoResolution.H_1440P: 0.16,
        VideoResolution.H_4K: 0.14,
    }
)

# Fallbacks (bits/s) when the budget computes to zero (audio-only, 0 fps)
DEFAULT_AVERAGE_BITRATE = 192 * 1000
DEFAULT_MAX_BITRATE = 256 * 1000
DEFAULT_MIN_BITRATE = 10 * 1000

# Margin added to the input bitrate before capping the target
INPUT_BITRATE_MARGIN = 0.3

# Aspect ratio assumed when a stream reports no width or height
DEFAULT_RATIO = 16 / 9

# Audio ceilings, in kbit/s
MAX_AUDIO_KBITRATE = 384
UNKNOWN_AUDIO_KBITRATE = 256
KEEP_AUDIO_BITRATE = -1


def calculate_bitrate(
    resolution: int,
    ratio: float,
    fps: float,
    bit_per_pixel: Mapping[int, float],
) -> int:
    """Compute a bitrate from a bits-per-pixel budget.

    A ratio of 0 or less (unknown frame size) is replaced by DEFAULT_RATIO.

    Args:
        resolution: Shorter frame side in pixels.
        ratio: Aspect ratio (longer over shorter side, or < 1 for portrait
            inputs expressed as width over height).
        fps: Frames per second.
        bit_per_pixel: Budget table keyed by resolution tier.

    Returns:
        Bitrate in bits per second, rounded down.

    Raises:
        ValueError: If the resolution is negative.
    """
    if ratio <= 0:
        ratio = DEFAULT_RATIO

    size1 = resolution
    size2 = resolution / ratio if ratio < 1 else resolution * ratio

    for tier in RESOLUTION_TIERS:
        if tier <= resolution:
            return math.floor(size1 * size2 * fps * bit_per_pixel[tier])

    raise ValueError(f"Unknown resolution {resolution}")


def get_average_theoretical_bitrate(resolution: int, fps: float, ratio: float) -> int:
    """Return the target bitrate budget for a resolution/fps/ratio triple."""
    bitrate = calculate_bitrate(resolution, ratio, fps, AVERAGE_BIT_PER_PIXEL)
    return bitrate or DEFAULT_AVERAGE_BITRATE


def get_max_theoretical_bitrate(resolution: int, fps: float, ratio: float) -> int:
    """Return the highest reasonable bitrate for a resolution/fps/ratio triple."""
    bitrate = calculate_bitrate(resolution, ratio, fps, MAX_BIT_PER_PIXEL)
    return bitrate or DEFAULT_MAX_BITRATE


def get_min_theoretical_bitrate(resolution: int, fps: float, ratio: float) -> int:
    """Return the lowest usable bitrate for a resolution/fps/ratio triple."""
    bitrate = calculate_bitrate(resolution, ratio, fps, MIN_BIT_PER_PIXEL)
    return bitrate or DEFAULT_MIN_BITRATE


def cap_bitrate(input_bitrate: int | None, target_bitrate: int) -> int:
    """Cap a target bitrate to the input bitrate plus a 30% margin.

    An unknown (None or 0) input bitrate leaves the target untouched.
    """
    if not input_bitrate:
        return target_bitrate

    with_margin = input_bitrate + input_bitrate * INPUT_BITRATE_MARGIN
    return min(target_bitrate, math.floor(with_margin))


def get_target_bitrate(
    input_bitrate: int | None,
    resolution: int,
    fps: float,
    ratio: float,
) -> int:
    """Compute the bitrate an encoder should aim for.

    Starts from the average theoretical bitrate, caps it at the input
    bitrate plus margin so small inputs are not inflated, then floors it at
    the minimum theoretical bitrate.

    Args:
        input_bitrate: Measured input bitrate in bits/s, None or 0 if unknown.
        resolution: Output resolution.
        fps: Output frame rate.
        ratio: Output aspect ratio.

    Returns:
        Target bitrate in bits/s.
    """
    capped = cap_bitrate(
        input_bitrate, get_average_theoretical_bitrate(resolution, fps, ratio)
    )
    floor = get_min_theoretical_bitrate(resolution, fps, ratio)
    return max(floor, capped)


def get_max_audio_bitrate(codec: str | None, bitrate: int | None) -> int:
    """Return an audio bitrate ceiling in kbit/s.

    Rough equivalences only: an AAC stream holds more information than an
    MP3 stream of the same bitrate, so AAC inputs keep their bitrate unless
    above the global ceiling.

    Args:
        codec: Input audio codec name.
        bitrate: Measured input audio bitrate in bits/s.

    Returns:
        Ceiling in kbit/s, or KEEP_AUDIO_BITRATE (-1) when an AAC input
        bitrate is already acceptable as is.
    """
    if not bitrate:
        return UNKNOWN_AUDIO_KBITRATE

    if codec == "aac":
        if bitrate > MAX_AUDIO_KBITRATE * 1000:
            return MAX_AUDIO_KBITRATE
        return KEEP_AUDIO_BITRATE

    if bitrate <= 192 * 1000:
        return 128
    if bitrate <= 384 * 1000:
        return 256
    return MAX_AUDIO_KBITRATE
