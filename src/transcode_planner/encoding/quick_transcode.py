"""Quick transcode eligibility.

A quick transcode copies the input streams into the output container instead
of re-encoding them. It is only safe when the streams are already in a shape
every player handles.
"""

import logging

from transcode_planner.domain.models import MediaFileDescriptor
from transcode_planner.encoding.bitrate import (
    KEEP_AUDIO_BITRATE,
    get_max_audio_bitrate,
    get_max_theoretical_bitrate,
)

logger = logging.getLogger(__name__)

QUICK_VIDEO_CODEC = "h264"
QUICK_PIXEL_FORMAT = "yuv420p"
QUICK_AUDIO_CODEC = "aac"
MIN_QUICK_FPS = 2

# Channel layouts that break playback in browsers when copied
UNSUPPORTED_CHANNEL_LAYOUTS = frozenset({"unknown", "quad"})

DEFAULT_PROFILE = "default"


def can_quick_transcode_video(descriptor: MediaFileDescriptor, max_fps: float) -> bool:
    """Check whether the video stream can be copied as is.

    Args:
        descriptor: Probed input file.
        max_fps: Highest frame rate allowed for the output.

    Returns:
        True if the stream is H.264, 4:2:0 planar, within frame rate bounds
        and not above the maximum theoretical bitrate.
    """
    # Without a measurement there is no way to tell whether it is sane
    if not descriptor.video_bitrate:
        return False

    if not descriptor.has_video or not descriptor.resolution:
        return False
    if descriptor.video_codec != QUICK_VIDEO_CODEC:
        return False
    if descriptor.pixel_format != QUICK_PIXEL_FORMAT:
        return False
    if descriptor.fps < MIN_QUICK_FPS or descriptor.fps > max_fps:
        return False

    max_bitrate = get_max_theoretical_bitrate(
        descriptor.resolution, descriptor.fps, descriptor.ratio
    )
    if descriptor.video_bitrate > max_bitrate:
        return False

    return True


def can_quick_transcode_audio(descriptor: MediaFileDescriptor) -> bool:
    """Check whether the audio stream can be copied as is.

    A file without audio has nothing to transcode and is always eligible.
    """
    if not descriptor.has_audio:
        return True

    if descriptor.audio_codec != QUICK_AUDIO_CODEC:
        return False

    bitrate = descriptor.audio_bitrate
    if not bitrate:
        return False

    max_kbitrate = get_max_audio_bitrate(QUICK_AUDIO_CODEC, bitrate)
    if max_kbitrate != KEEP_AUDIO_BITRATE and bitrate > max_kbitrate * 1000:
        return False

    layout = descriptor.channel_layout
    if not layout or layout in UNSUPPORTED_CHANNEL_LAYOUTS:
        return False

    return True


def can_quick_transcode(
    descriptor: MediaFileDescriptor,
    max_fps: float,
    profile: str = DEFAULT_PROFILE,
) -> bool:
    """Check whether both streams of a file can be copied.

    Custom encoding profiles may change the output in ways the input cannot
    satisfy, so only the default profile allows quick transcoding.

    Args:
        descriptor: Probed input file.
        max_fps: Highest frame rate allowed for the output.
        profile: Configured encoding profile name.

    Returns:
        True if the file can be stream copied.
    """
    if profile != DEFAULT_PROFILE:
        logger.debug("Quick transcode disabled by encoding profile %s", profile)
        return False

    result = can_quick_transcode_video(
        descriptor, max_fps
    ) and can_quick_transcode_audio(descriptor)
    logger.debug("Quick transcode for %s: %s", descriptor.path, result)
    return result
