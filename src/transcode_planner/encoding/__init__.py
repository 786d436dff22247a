"""Encoding decisions: bitrate model, quick transcode and encoder profiles.

Everything in this package is pure: no probing, no subprocesses.
"""

from transcode_planner.encoding.bitrate import (
    get_average_theoretical_bitrate,
    get_max_audio_bitrate,
    get_max_theoretical_bitrate,
    get_min_theoretical_bitrate,
    get_target_bitrate,
)
from transcode_planner.encoding.exceptions import (
    EncoderBuilderError,
    EncoderError,
    NoEncoderAvailableError,
)
from transcode_planner.encoding.profiles import (
    EncoderOptionsBuilder,
    EncoderOptionsBuilderParams,
)
from transcode_planner.encoding.quick_transcode import (
    can_quick_transcode,
    can_quick_transcode_audio,
    can_quick_transcode_video,
)
from transcode_planner.encoding.registry import EncoderProfileRegistry, build_registry

__all__ = [
    # Bitrate model
    "get_average_theoretical_bitrate",
    "get_max_audio_bitrate",
    "get_max_theoretical_bitrate",
    "get_min_theoretical_bitrate",
    "get_target_bitrate",
    # Quick transcode
    "can_quick_transcode",
    "can_quick_transcode_audio",
    "can_quick_transcode_video",
    # Profiles
    "EncoderOptionsBuilder",
    "EncoderOptionsBuilderParams",
    "EncoderProfileRegistry",
    "build_registry",
    # Errors
    "EncoderBuilderError",
    "EncoderError",
    "NoEncoderAvailableError",
]
