"""Domain enums for transcode planning.

This module contains the enums shared by the bitrate model, the encoder
registry and the job graph builder.
"""

from enum import Enum, IntEnum


class VideoResolution(IntEnum):
    """Standard output resolutions, expressed as the shorter frame side.

    H_NOVIDEO is the sentinel used for audio-only renditions.
    """

    H_NOVIDEO = 0
    H_144P = 144
    H_240P = 240
    H_360P = 360
    H_480P = 480
    H_720P = 720
    H_1080P = 1080
    H_1440P = 1440
    H_4K = 2160


class TranscodingContext(Enum):
    """Output context an encoding is produced for."""

    VOD = "vod"  # Pre-recorded video processed once
    LIVE = "live"  # Live stream transcoded on the fly


class StreamType(Enum):
    """Logical stream type an encoder is selected for."""

    VIDEO = "video"
    AUDIO = "audio"


class OutputKind(Enum):
    """Kind of output requested by an explicit regeneration."""

    HLS = "hls"  # Segmented adaptive streaming output
    WEB_VIDEO = "web-video"  # Single flat file per rendition


class JobKind(Enum):
    """Kind of job payload handed to the job queue."""

    OPTIMIZE = "optimize"
    MERGE_AUDIO = "merge-audio"
    HLS = "hls"
    WEB_VIDEO = "web-video"
