"""Pure parsing functions for ffprobe JSON output.

These functions turn `ffprobe -show_streams -show_format` JSON into a
MediaFileDescriptor. No I/O happens here.
"""

import logging
from pathlib import Path
from typing import Any

from transcode_planner.domain.models import MediaFileDescriptor

logger = logging.getLogger(__name__)


def parse_frame_rate(value: str | None) -> float | None:
    """Parse an ffprobe frame rate ("30000/1001" or "25") into fps.

    Returns:
        Frame rate rounded to two decimals, or None when missing, invalid
        or zero ("0/0" is common for streams without a rate).
    """
    if not value:
        return None
    try:
        if "/" in value:
            num, denom = value.split("/", 1)
            fps = int(num) / int(denom)
        else:
            fps = float(value)
    except (ValueError, ZeroDivisionError):
        return None
    if fps <= 0:
        return None
    return round(fps, 2)


def parse_int(value: Any, field_name: str, path: Path) -> int | None:
    """Parse a non-negative integer field that ffprobe reports as a string."""
    if value is None or value == "N/A":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s in %s: %r", field_name, path, value)
        return None
    if parsed < 0:
        logger.warning("Invalid negative %s in %s: %d", field_name, path, parsed)
        return None
    return parsed


def parse_duration(value: Any) -> float | None:
    """Parse duration string from ffprobe into seconds."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _first_stream(streams: list[dict], codec_type: str) -> dict | None:
    for stream in streams:
        if stream.get("codec_type") != codec_type:
            continue
        # Cover art is reported as a video stream
        if stream.get("disposition", {}).get("attached_pic"):
            continue
        return stream
    return None


def get_stream_fps(stream: dict) -> float:
    """Frame rate of a video stream: avg_frame_rate, then r_frame_rate, else 0."""
    for key in ("avg_frame_rate", "r_frame_rate"):
        fps = parse_frame_rate(stream.get(key))
        if fps is not None:
            return fps
    return 0.0


def parse_ffprobe_output(path: Path, data: dict) -> MediaFileDescriptor:
    """Build a MediaFileDescriptor from ffprobe JSON.

    The first video stream (cover art excluded) and the first audio stream
    are used. A video stream without its own bit rate falls back to the
    container bit rate.

    Args:
        path: Probed file path.
        data: Parsed ffprobe JSON with "streams" and "format".

    Returns:
        Frozen descriptor of the file.
    """
    streams = data.get("streams", [])
    container = data.get("format", {})

    descriptor_fields: dict[str, Any] = {
        "path": path,
        "container_format": container.get("format_name"),
        "duration_seconds": parse_duration(container.get("duration")),
    }

    video = _first_stream(streams, "video")
    if video is not None:
        video_bitrate = parse_int(video.get("bit_rate"), "video bit_rate", path)
        if video_bitrate is None:
            video_bitrate = parse_int(container.get("bit_rate"), "bit_rate", path)
        descriptor_fields.update(
            width=parse_int(video.get("width"), "width", path),
            height=parse_int(video.get("height"), "height", path),
            fps=get_stream_fps(video),
            video_codec=video.get("codec_name"),
            pixel_format=video.get("pix_fmt"),
            video_bitrate=video_bitrate,
        )

    audio = _first_stream(streams, "audio")
    if audio is not None:
        descriptor_fields.update(
            audio_codec=audio.get("codec_name"),
            audio_bitrate=parse_int(audio.get("bit_rate"), "audio bit_rate", path),
            channel_layout=audio.get("channel_layout"),
        )

    return MediaFileDescriptor(**descriptor_fields)
