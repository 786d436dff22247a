"""Payload builder hooks.

The job graph builder decides which jobs to request, at which resolution and
frame rate, and in which stage. Building the payloads themselves is left to
a PayloadBuilders strategy so a hosting platform can attach its own data.
"""

from __future__ import annotations

from typing import Protocol

from transcode_planner.domain.models import (
    HLSPayload,
    JobPayload,
    MergeAudioPayload,
    OptimizePayload,
    WebVideoPayload,
)
from transcode_planner.planning.media import Video, VideoFile


class PayloadBuilders(Protocol):
    """The four payload hooks used by JobGraphBuilder."""

    def build_optimize_payload(
        self,
        *,
        video: Video,
        input_file: VideoFile,
        is_new_video: bool,
        quick_transcode: bool,
        resolution: int,
        fps: float,
    ) -> JobPayload: ...

    def build_merge_audio_payload(
        self,
        *,
        video: Video,
        input_file: VideoFile,
        is_new_video: bool,
        resolution: int,
        fps: float,
    ) -> JobPayload: ...

    def build_hls_payload(
        self,
        *,
        video: Video,
        resolution: int,
        fps: float,
        is_new_video: bool,
        separated_audio: bool,
        delete_web_video_files: bool = False,
        copy_codecs: bool = False,
    ) -> JobPayload: ...

    def build_web_video_payload(
        self,
        *,
        video: Video,
        resolution: int,
        fps: float,
        is_new_video: bool,
    ) -> JobPayload: ...


class DefaultPayloadBuilders:
    """Builds the frozen payload dataclasses of transcode_planner.domain."""

    def build_optimize_payload(
        self,
        *,
        video: Video,
        input_file: VideoFile,
        is_new_video: bool,
        quick_transcode: bool,
        resolution: int,
        fps: float,
    ) -> OptimizePayload:
        return OptimizePayload(
            video_uuid=video.uuid,
            resolution=resolution,
            fps=fps,
            is_new_video=is_new_video,
            input_file=str(input_file.path),
            quick_transcode=quick_transcode,
        )

    def build_merge_audio_payload(
        self,
        *,
        video: Video,
        input_file: VideoFile,
        is_new_video: bool,
        resolution: int,
        fps: float,
    ) -> MergeAudioPayload:
        return MergeAudioPayload(
            video_uuid=video.uuid,
            resolution=resolution,
            fps=fps,
            is_new_video=is_new_video,
            input_file=str(input_file.path),
        )

    def build_hls_payload(
        self,
        *,
        video: Video,
        resolution: int,
        fps: float,
        is_new_video: bool,
        separated_audio: bool,
        delete_web_video_files: bool = False,
        copy_codecs: bool = False,
    ) -> HLSPayload:
        return HLSPayload(
            video_uuid=video.uuid,
            resolution=resolution,
            fps=fps,
            is_new_video=is_new_video,
            separated_audio=separated_audio,
            copy_codecs=copy_codecs,
            delete_web_video_files=delete_web_video_files,
        )

    def build_web_video_payload(
        self,
        *,
        video: Video,
        resolution: int,
        fps: float,
        is_new_video: bool,
    ) -> WebVideoPayload:
        return WebVideoPayload(
            video_uuid=video.uuid,
            resolution=resolution,
            fps=fps,
            is_new_video=is_new_video,
        )
