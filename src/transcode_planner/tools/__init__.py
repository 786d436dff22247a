"""External tool helpers."""

from transcode_planner.tools.encoders import (
    EncoderDetectionError,
    detect_available_encoders,
    parse_encoder_list,
)

__all__ = [
    "EncoderDetectionError",
    "detect_available_encoders",
    "parse_encoder_list",
]
