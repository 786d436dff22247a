"""Job graph builder: turns a video into a staged graph of encode jobs.

Two entry points exist:

- create_optimize_or_merge_audio_jobs plans every rendition of a freshly
  uploaded (or replaced) file: an origin rendition in the root stage, then
  one stage per lower ladder resolution.
- create_transcoding_jobs regenerates an explicit set of resolutions for
  one output kind, bypassing the ladder policy.

Either way the whole graph is handed to the job sink in a single
create_jobs call, after the video lock has been released.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from transcode_planner.config.models import PlannerConfig
from transcode_planner.domain.enums import (
    OutputKind,
    TranscodingContext,
    VideoResolution,
)
from transcode_planner.domain.models import JobPayload, StagedGraph
from transcode_planner.encoding.quick_transcode import can_quick_transcode
from transcode_planner.introspector.interface import MediaIntrospector
from transcode_planner.jobs.exceptions import JobEnqueueError
from transcode_planner.jobs.sink import JobSink
from transcode_planner.logging.context import video_context
from transcode_planner.planning.framerate import compute_output_fps
from transcode_planner.planning.locks import InProcessVideoLocks, VideoLockProvider
from transcode_planner.planning.media import Video, VideoFile
from transcode_planner.planning.payloads import DefaultPayloadBuilders, PayloadBuilders
from transcode_planner.planning.resolutions import (
    build_original_file_resolution,
    compute_resolutions_to_transcode,
)

logger = logging.getLogger(__name__)

# Receives the lower ladder of an upload, returns the ladder to plan
ResolutionsFilter = Callable[[list[int]], list[int]]

# Audio-only inputs are merged with a still image at this size and rate
DEFAULT_AUDIO_RESOLUTION = VideoResolution.H_480P
DEFAULT_AUDIO_MERGE_FPS = 25


class PlanningError(Exception):
    """Base exception for job graph planning errors."""


class UnknownTranscodingTypeError(PlanningError):
    """Raised when an explicit regeneration names an unknown output kind."""

    def __init__(self, transcoding_type: object) -> None:
        self.transcoding_type = transcoding_type
        valid = ", ".join(kind.value for kind in OutputKind)
        super().__init__(
            f"Unknown transcoding type {transcoding_type!r}, expected one of: {valid}"
        )


def _parse_output_kind(transcoding_type: OutputKind | str) -> OutputKind:
    if isinstance(transcoding_type, OutputKind):
        return transcoding_type
    try:
        return OutputKind(transcoding_type)
    except ValueError as e:
        raise UnknownTranscodingTypeError(transcoding_type) from e


class JobGraphBuilder:
    """Plans staged job graphs and hands them to a job sink.

    The builder is stateless between invocations: configuration and
    collaborators are fixed at construction, everything else lives for one
    call.
    """

    def __init__(
        self,
        config: PlannerConfig,
        job_sink: JobSink,
        introspector: MediaIntrospector,
        lock_provider: VideoLockProvider | None = None,
        payload_builders: PayloadBuilders | None = None,
        resolutions_filter: ResolutionsFilter | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Planner configuration (read-only).
            job_sink: Receives the staged graph of every invocation.
            introspector: Probes the input file.
            lock_provider: Per-video locks. Defaults to in-process locks.
            payload_builders: Payload hooks. Defaults to the domain payloads.
            resolutions_filter: Adjusts the lower resolution ladder planned
                after the origin rendition. Not applied to explicit
                regenerations.
        """
        self._config = config
        self._sink = job_sink
        self._introspector = introspector
        self._locks = lock_provider or InProcessVideoLocks(
            timeout=config.locks.timeout_seconds
        )
        self._builders = payload_builders or DefaultPayloadBuilders()
        self._resolutions_filter = resolutions_filter

    def create_optimize_or_merge_audio_jobs(
        self,
        video: Video,
        video_file: VideoFile,
        is_new_video: bool,
        user: Any,
        video_file_already_locked: bool = False,
    ) -> StagedGraph:
        """Plan every rendition of a video file and enqueue the graph.

        Args:
            video: Video the file belongs to.
            video_file: The file to transcode from.
            is_new_video: True for a first upload, False for a replacement.
            user: Requesting user, passed through to the job sink.
            video_file_already_locked: True when the caller already holds
                the video lock.

        Returns:
            The staged graph handed to the job sink. Stage 0 is the root
            stage and may be empty when no output is enabled.

        Raises:
            LockAcquisitionError: If the video lock cannot be taken.
            MediaIntrospectionError: If the file cannot be probed.
            InvalidFrameRateError: If the file frame rate is unusable.
            JobEnqueueError: If the job sink fails. The lock is already
                released at that point.
        """
        with video_context(video.uuid, "plan"):
            lock: AbstractContextManager[None] = (
                nullcontext()
                if video_file_already_locked
                else self._locks.lock(video.uuid)
            )
            with lock:
                video.reload()
                video_file.reload()
                payloads = self._plan_from_scratch(video, video_file, is_new_video)

            logger.info(
                "Planned %d job(s) in %d stage(s)",
                sum(len(stage) for stage in payloads),
                len(payloads),
            )
            self._create_jobs(video, payloads, user)
            return payloads

    def create_transcoding_jobs(
        self,
        transcoding_type: OutputKind | str,
        video: Video,
        resolutions: Iterable[int],
        is_new_video: bool,
        user: Any = None,
    ) -> StagedGraph:
        """Plan an explicit set of renditions of one output kind.

        The highest requested resolution is the root; every other one is a
        child in a single shared stage. With HLS and split audio, an
        audio-only HLS job is staged ahead of the root.

        Args:
            transcoding_type: "hls" or "web-video".
            video: Video to regenerate renditions of.
            resolutions: Requested resolutions.
            is_new_video: Passed through to every payload.
            user: Accepted for symmetry; the graph is enqueued without user.

        Returns:
            The staged graph handed to the job sink.

        Raises:
            UnknownTranscodingTypeError: Before any work, for an unknown kind.
            ValueError: If no resolution is requested.
            JobEnqueueError: If the job sink fails.
        """
        output_kind = _parse_output_kind(transcoding_type)
        requested = list(dict.fromkeys(int(r) for r in resolutions))
        if not requested:
            raise ValueError("At least one resolution is required")

        with video_context(video.uuid, f"regenerate-{output_kind.value}"):
            payloads = self._plan_explicit(output_kind, video, requested, is_new_video)
            logger.info(
                "Planned %d %s job(s) in %d stage(s)",
                sum(len(stage) for stage in payloads),
                output_kind.value,
                len(payloads),
            )
            self._create_jobs(video, payloads, None)
            return payloads

    # -------------------------------------------------------------------------

    def _plan_from_scratch(
        self, video: Video, video_file: VideoFile, is_new_video: bool
    ) -> StagedGraph:
        transcoding = self._config.transcoding

        descriptor = self._introspector.get_descriptor(video_file.path)
        quick_transcode = can_quick_transcode(
            descriptor, transcoding.fps_max, transcoding.profile
        )
        logger.debug("Quick transcode eligible: %s", quick_transcode)

        is_audio_input = video_file.is_audio()
        if is_audio_input:
            origin_resolution = int(DEFAULT_AUDIO_RESOLUTION)
            origin_fps: float = min(DEFAULT_AUDIO_MERGE_FPS, transcoding.fps_max)
        else:
            origin_resolution = build_original_file_resolution(
                video_file.resolution, transcoding
            )
            origin_fps = compute_output_fps(
                video_file.fps,
                origin_resolution,
                is_origin_resolution=True,
                context=TranscodingContext.VOD,
                config=self._config,
            )
        logger.debug("Origin rendition: %sp @ %s fps", origin_resolution, origin_fps)

        has_audio = video_file.has_audio()
        split_audio = transcoding.split_audio_and_video and has_audio
        hls_audio_generated = False
        root: list[JobPayload] = []

        if transcoding.hls_enabled:
            root.append(
                self._builders.build_hls_payload(
                    video=video,
                    resolution=origin_resolution,
                    fps=origin_fps,
                    is_new_video=is_new_video,
                    separated_audio=transcoding.split_audio_and_video,
                    delete_web_video_files=(
                        not transcoding.web_videos_enabled and not split_audio
                    ),
                    copy_codecs=quick_transcode,
                )
            )
            if split_audio:
                hls_audio_generated = True
                root.append(
                    self._builders.build_hls_payload(
                        video=video,
                        resolution=int(VideoResolution.H_NOVIDEO),
                        fps=0,
                        is_new_video=is_new_video,
                        separated_audio=True,
                        delete_web_video_files=not transcoding.web_videos_enabled,
                        copy_codecs=quick_transcode,
                    )
                )

        if transcoding.web_videos_enabled:
            if is_audio_input:
                root.append(
                    self._builders.build_merge_audio_payload(
                        video=video,
                        input_file=video_file,
                        is_new_video=is_new_video,
                        resolution=origin_resolution,
                        fps=origin_fps,
                    )
                )
            else:
                root.append(
                    self._builders.build_optimize_payload(
                        video=video,
                        input_file=video_file,
                        is_new_video=is_new_video,
                        quick_transcode=quick_transcode,
                        resolution=origin_resolution,
                        fps=origin_fps,
                    )
                )

        lower = self._build_lower_resolution_stages(
            video,
            origin_resolution,
            origin_fps,
            has_audio=has_audio,
            is_new_video=is_new_video,
            hls_audio_generated=hls_audio_generated,
        )
        return [root, *lower]

    def _build_lower_resolution_stages(
        self,
        video: Video,
        origin_resolution: int,
        origin_fps: float,
        *,
        has_audio: bool,
        is_new_video: bool,
        hls_audio_generated: bool,
    ) -> StagedGraph:
        transcoding = self._config.transcoding
        resolutions = compute_resolutions_to_transcode(
            origin_resolution,
            has_audio=has_audio,
            include_input=False,
            strict_lower=True,
            enabled=transcoding.resolutions,
        )
        if self._resolutions_filter is not None:
            resolutions = list(self._resolutions_filter(resolutions))
        logger.debug("Lower resolutions: %s", resolutions)

        stages: StagedGraph = []
        for resolution in resolutions:
            fps = compute_output_fps(
                origin_fps,
                resolution,
                is_origin_resolution=resolution == origin_resolution,
                context=TranscodingContext.VOD,
                config=self._config,
            )
            generate_hls = transcoding.hls_enabled and not (
                resolution == VideoResolution.H_NOVIDEO and hls_audio_generated
            )

            stage: list[JobPayload] = []
            if transcoding.web_videos_enabled:
                stage.append(
                    self._builders.build_web_video_payload(
                        video=video,
                        resolution=resolution,
                        fps=fps,
                        is_new_video=is_new_video,
                    )
                )
            if generate_hls:
                stage.append(
                    self._builders.build_hls_payload(
                        video=video,
                        resolution=resolution,
                        fps=fps,
                        is_new_video=is_new_video,
                        separated_audio=transcoding.split_audio_and_video,
                        copy_codecs=False,
                    )
                )
            if stage:
                stages.append(stage)
        return stages

    def _plan_explicit(
        self,
        output_kind: OutputKind,
        video: Video,
        resolutions: list[int],
        is_new_video: bool,
    ) -> StagedGraph:
        split_audio = (
            output_kind is OutputKind.HLS
            and self._config.transcoding.split_audio_and_video
        )
        input_fps = video.max_fps()
        root_resolution = max(resolutions)
        root_fps = compute_output_fps(
            input_fps,
            root_resolution,
            is_origin_resolution=True,
            context=TranscodingContext.VOD,
            config=self._config,
        )

        def build(resolution: int, fps: float) -> JobPayload:
            if output_kind is OutputKind.HLS:
                return self._builders.build_hls_payload(
                    video=video,
                    resolution=resolution,
                    fps=fps,
                    is_new_video=is_new_video,
                    separated_audio=self._config.transcoding.split_audio_and_video,
                )
            return self._builders.build_web_video_payload(
                video=video, resolution=resolution, fps=fps, is_new_video=is_new_video
            )

        def skipped(resolution: int) -> bool:
            # Produced by the audio stage
            return split_audio and resolution == VideoResolution.H_NOVIDEO

        children = [
            build(
                resolution,
                compute_output_fps(
                    input_fps,
                    resolution,
                    is_origin_resolution=False,
                    context=TranscodingContext.VOD,
                    config=self._config,
                ),
            )
            for resolution in resolutions
            if resolution != root_resolution and not skipped(resolution)
        ]

        payloads: StagedGraph = []
        if split_audio:
            payloads.append([build(int(VideoResolution.H_NOVIDEO), root_fps)])
        if not skipped(root_resolution):
            payloads.append([build(root_resolution, root_fps)])
        if children:
            payloads.append(children)
        return payloads

    def _create_jobs(self, video: Video, payloads: StagedGraph, user: Any) -> None:
        try:
            self._sink.create_jobs(video=video, payloads=payloads, user=user)
        except JobEnqueueError:
            raise
        except Exception as e:
            raise JobEnqueueError(video.uuid, str(e)) from e
