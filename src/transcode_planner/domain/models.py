"""Domain models for transcode planning.

These models represent probed media, encoder decisions and the job payloads
the planner hands to the job queue. All of them are frozen: they are created
once per planning invocation and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from transcode_planner.domain.enums import JobKind


@dataclass(frozen=True)
class MediaFileDescriptor:
    """Stream parameters of a probed media file."""

    path: Path
    container_format: str | None = None
    # Video stream (all None when the file has no video stream)
    width: int | None = None
    height: int | None = None
    fps: float = 0.0
    video_codec: str | None = None
    pixel_format: str | None = None
    video_bitrate: int | None = None  # bits/s, stream value or container value
    # Audio stream (all None when the file has no audio stream)
    audio_codec: str | None = None
    audio_bitrate: int | None = None  # bits/s
    channel_layout: str | None = None
    duration_seconds: float | None = None

    @property
    def has_video(self) -> bool:
        """Return True if a video stream was found."""
        return self.video_codec is not None

    @property
    def has_audio(self) -> bool:
        """Return True if an audio stream was found."""
        return self.audio_codec is not None

    @property
    def resolution(self) -> int:
        """Shorter side of the frame, 0 without a video stream."""
        if not self.width or not self.height:
            return 0
        return min(self.width, self.height)

    @property
    def ratio(self) -> float:
        """Aspect ratio as longer side over shorter side."""
        if not self.width or not self.height:
            return 0.0
        return max(self.width, self.height) / min(self.width, self.height)

    @property
    def is_portrait(self) -> bool:
        """Return True if the frame is taller than wide."""
        return bool(self.width and self.height and self.height > self.width)


@dataclass(frozen=True)
class EncoderOptionsResult:
    """Options produced by an encoder option builder.

    When is_stream_copy is set the stream is copied and options are empty.
    """

    is_stream_copy: bool = False
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectedEncoder:
    """Encoder picked from a context try-list and the options it built."""

    encoder: str
    result: EncoderOptionsResult


# =============================================================================
# Job payloads
# =============================================================================


@dataclass(frozen=True)
class _BasePayload:
    video_uuid: str
    resolution: int
    fps: float
    is_new_video: bool

    kind: JobKind = field(init=False)

    def _flags(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the payload for the job queue."""
        return {
            "kind": self.kind.value,
            "videoUUID": self.video_uuid,
            "resolution": self.resolution,
            "fps": self.fps,
            "isNewVideo": self.is_new_video,
            "flags": self._flags(),
        }


@dataclass(frozen=True)
class OptimizePayload(_BasePayload):
    """Re-encode the input file in place into a web playable flat file."""

    input_file: str = ""
    quick_transcode: bool = False

    kind: JobKind = field(init=False, default=JobKind.OPTIMIZE)

    def _flags(self) -> dict[str, Any]:
        return {"inputFile": self.input_file, "quickTranscode": self.quick_transcode}


@dataclass(frozen=True)
class MergeAudioPayload(_BasePayload):
    """Merge an audio-only input with a still image into a flat file."""

    input_file: str = ""

    kind: JobKind = field(init=False, default=JobKind.MERGE_AUDIO)

    def _flags(self) -> dict[str, Any]:
        return {"inputFile": self.input_file}


@dataclass(frozen=True)
class HLSPayload(_BasePayload):
    """Produce a segmented streaming rendition."""

    separated_audio: bool = False
    copy_codecs: bool = False
    delete_web_video_files: bool = False

    kind: JobKind = field(init=False, default=JobKind.HLS)

    def _flags(self) -> dict[str, Any]:
        return {
            "copyCodecs": self.copy_codecs,
            "separatedAudio": self.separated_audio,
            "deleteWebVideoFiles": self.delete_web_video_files,
        }


@dataclass(frozen=True)
class WebVideoPayload(_BasePayload):
    """Produce a flat web playable file for one resolution."""

    kind: JobKind = field(init=False, default=JobKind.WEB_VIDEO)


JobPayload = Union[OptimizePayload, MergeAudioPayload, HLSPayload, WebVideoPayload]

# Stage 0 is the root stage; every later stage depends on the one before it.
StagedGraph = list[list[JobPayload]]


def staged_graph_to_list(payloads: StagedGraph) -> list[list[dict[str, Any]]]:
    """Serialize a staged graph into JSON compatible lists."""
    return [[payload.to_dict() for payload in stage] for stage in payloads]
