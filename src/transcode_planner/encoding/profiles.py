"""Default encoder option builders and per-resolution tuning tables.

Each builder is a pure function from stream parameters to an
EncoderOptionsResult. Options are opaque ffmpeg tokens such as
"-preset veryslow"; the command builder splits them on whitespace.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from transcode_planner.domain.enums import VideoResolution
from transcode_planner.domain.models import EncoderOptionsResult, MediaFileDescriptor
from transcode_planner.encoding.bitrate import (
    KEEP_AUDIO_BITRATE,
    get_max_audio_bitrate,
    get_target_bitrate,
)
from transcode_planner.encoding.exceptions import EncoderBuilderError
from transcode_planner.encoding.quick_transcode import can_quick_transcode_audio


@dataclass(frozen=True)
class EncoderOptionsBuilderParams:
    """Inputs handed to every encoder option builder."""

    resolution: int
    fps: float
    input_bitrate: int | None
    input_ratio: float
    probe: MediaFileDescriptor
    stream_num: int | None = None
    can_copy_audio: bool = False


EncoderOptionsBuilder = Callable[[EncoderOptionsBuilderParams], EncoderOptionsResult]


@dataclass(frozen=True)
class RateMultipliers:
    """maxrate and bufsize expressed as multiples of the target bitrate."""

    max_rate: float
    buf_size: float


@dataclass(frozen=True)
class HEVCTuning:
    """Per-resolution libx265 tuning."""

    crf: int
    preset: str
    pix_fmt: str
    rates: RateMultipliers


# =============================================================================
# Tuning tables
# =============================================================================

H264_BASE_OPTIONS: tuple[str, ...] = (
    "-sws_flags lanczos+accurate_rnd",
    "-preset veryslow",
    "-crf 20",
)
H264_PIX_FMT = "yuv420p"
H264_X264_OPTS = "ref=5:trellis=2:psy=1:psy_rd=2.0:subme=11:rc_lookahead=240"

H264_RATE_MULTIPLIERS: Mapping[int, RateMultipliers] = MappingProxyType(
    {
        VideoResolution.H_4K: RateMultipliers(1.5, 3),
        VideoResolution.H_1440P: RateMultipliers(2, 4),
        VideoResolution.H_1080P: RateMultipliers(2.5, 5),
        VideoResolution.H_720P: RateMultipliers(2.3, 4.6),
        VideoResolution.H_480P: RateMultipliers(2.3, 4.6),
        VideoResolution.H_360P: RateMultipliers(3.5, 7),
        VideoResolution.H_240P: RateMultipliers(5, 10),
        VideoResolution.H_144P: RateMultipliers(5, 10),
    }
)
# Custom resolutions get the tightest pair
DEFAULT_RATE_MULTIPLIERS = RateMultipliers(1.5, 3)

HEVC_TUNING: Mapping[int, HEVCTuning] = MappingProxyType(
    {
        VideoResolution.H_4K: HEVCTuning(
            24, "slow", "yuv420p10le", RateMultipliers(1.5, 3)
        ),
        VideoResolution.H_1440P: HEVCTuning(
            24, "slow", "yuv420p10le", RateMultipliers(2, 4)
        ),
        VideoResolution.H_1080P: HEVCTuning(
            23, "slow", "yuv420p", RateMultipliers(2.5, 5)
        ),
        VideoResolution.H_720P: HEVCTuning(
            23, "medium", "yuv420p", RateMultipliers(2.3, 4.6)
        ),
        VideoResolution.H_480P: HEVCTuning(
            22, "medium", "yuv420p", RateMultipliers(2.3, 4.6)
        ),
        VideoResolution.H_360P: HEVCTuning(
            22, "fast", "yuv420p", RateMultipliers(3.5, 7)
        ),
        VideoResolution.H_240P: HEVCTuning(
            21, "fast", "yuv420p", RateMultipliers(5, 10)
        ),
        VideoResolution.H_144P: HEVCTuning(
            21, "fast", "yuv420p", RateMultipliers(5, 10)
        ),
    }
)
DEFAULT_HEVC_TUNING = HEVCTuning(24, "slow", "yuv420p", DEFAULT_RATE_MULTIPLIERS)

# Forced on re-encoded audio: other layouts break HLS playback in Chrome
FORCED_CHANNEL_LAYOUT = "-channel_layout stereo"
FLAT_AUDIO_KBITRATE = 320


# =============================================================================
# Helpers
# =============================================================================


def build_stream_suffix(option: str, stream_num: int | None = None) -> str:
    """Append a stream specifier to an option (e.g., -b:v -> -b:v:1)."""
    if stream_num is not None:
        return f"{option}:{stream_num}"
    return option


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _gop_size(fps: float) -> int:
    return round(fps * 2)


def get_h264_rate_multipliers(resolution: int) -> RateMultipliers:
    """Return the libx264 maxrate/bufsize multipliers for a resolution."""
    return H264_RATE_MULTIPLIERS.get(resolution, DEFAULT_RATE_MULTIPLIERS)


def get_hevc_tuning(resolution: int) -> HEVCTuning:
    """Return the libx265 tuning row for a resolution."""
    return HEVC_TUNING.get(resolution, DEFAULT_HEVC_TUNING)


def _rate_options(target_bitrate: int, rates: RateMultipliers) -> list[str]:
    return [
        f"-maxrate:v {round(target_bitrate * rates.max_rate)}",
        f"-bufsize:v {round(target_bitrate * rates.buf_size)}",
    ]


def _target_bitrate(params: EncoderOptionsBuilderParams) -> int:
    return get_target_bitrate(
        params.input_bitrate, params.resolution, params.fps, params.input_ratio
    )


def _require_video(params: EncoderOptionsBuilderParams) -> None:
    if params.resolution <= 0:
        raise EncoderBuilderError("Video encoders need a video resolution")


# =============================================================================
# Video builders
# =============================================================================


def h264_vod_options(resolution: int, fps: float, target_bitrate: int) -> list[str]:
    """Build the libx264 on-demand options for one rendition."""
    options = [
        *H264_BASE_OPTIONS,
        f"-g {_gop_size(fps)}",
        f"-pix_fmt {H264_PIX_FMT}",
        f"-x264opts {H264_X264_OPTS}",
    ]
    return options + _rate_options(
        target_bitrate, get_h264_rate_multipliers(resolution)
    )


def default_x264_vod_options_builder(
    params: EncoderOptionsBuilderParams,
) -> EncoderOptionsResult:
    _require_video(params)
    options = h264_vod_options(params.resolution, params.fps, _target_bitrate(params))
    return EncoderOptionsResult(options=tuple(options))


def default_x265_vod_options_builder(
    params: EncoderOptionsBuilderParams,
) -> EncoderOptionsResult:
    """libx265 on-demand options, 10-bit on the two highest tiers."""
    _require_video(params)
    tuning = get_hevc_tuning(params.resolution)
    options = [
        "-sws_flags lanczos+accurate_rnd",
        f"-preset {tuning.preset}",
        f"-crf {tuning.crf}",
        f"-g {_gop_size(params.fps)}",
        f"-pix_fmt {tuning.pix_fmt}",
        "-tag:v hvc1",
    ]
    options += _rate_options(_target_bitrate(params), tuning.rates)
    return EncoderOptionsResult(options=tuple(options))


def default_x264_live_options_builder(
    params: EncoderOptionsBuilderParams,
) -> EncoderOptionsResult:
    _require_video(params)
    target_bitrate = _target_bitrate(params)
    stream_num = params.stream_num

    options = (
        "-preset veryfast",
        f"{build_stream_suffix('-maxrate:v', stream_num)} {target_bitrate}",
        f"{build_stream_suffix('-bufsize:v', stream_num)} {target_bitrate * 2}",
        # b-strategy 1 is the heuristic algorithm, 16 B-frames is optimal for it
        "-b_strategy 1",
        "-bf 16",
        f"{build_stream_suffix('-r:v', stream_num)} {_format_number(params.fps)}",
        f"{build_stream_suffix('-b:v', stream_num)} {target_bitrate}",
    )
    return EncoderOptionsResult(options=options)


# =============================================================================
# Audio builders
# =============================================================================


def _copy_audio(params: EncoderOptionsBuilderParams) -> bool:
    return params.can_copy_audio and can_quick_transcode_audio(params.probe)


def default_aac_options_builder(
    params: EncoderOptionsBuilderParams,
) -> EncoderOptionsResult:
    """AAC options with a ceiling derived from the measured input bitrate."""
    if _copy_audio(params):
        return EncoderOptionsResult(is_stream_copy=True)

    probe = params.probe
    # Rough match of bitrates to save some space, far from perfect
    kbitrate = get_max_audio_bitrate(probe.audio_codec, probe.audio_bitrate)

    if kbitrate != KEEP_AUDIO_BITRATE:
        bitrate_option = build_stream_suffix("-b:a", params.stream_num)
        return EncoderOptionsResult(
            options=(FORCED_CHANNEL_LAYOUT, f"{bitrate_option} {kbitrate}k")
        )
    return EncoderOptionsResult(options=(FORCED_CHANNEL_LAYOUT,))


def flat_bitrate_aac_options_builder(
    params: EncoderOptionsBuilderParams,
) -> EncoderOptionsResult:
    """AAC options at a flat high bitrate, whatever the input measured."""
    if _copy_audio(params):
        return EncoderOptionsResult(is_stream_copy=True)

    bitrate_option = build_stream_suffix("-b:a", params.stream_num)
    return EncoderOptionsResult(
        options=(FORCED_CHANNEL_LAYOUT, f"{bitrate_option} {FLAT_AUDIO_KBITRATE}k")
    )


def default_libfdk_aac_vod_options_builder(
    params: EncoderOptionsBuilderParams,
) -> EncoderOptionsResult:
    return EncoderOptionsResult(
        options=(f"{build_stream_suffix('-q:a', params.stream_num)} 5",)
    )
