"""Job graph planning: resolution ladder, frame rates, locks and the builder."""

from transcode_planner.planning.builder import (
    DEFAULT_AUDIO_MERGE_FPS,
    DEFAULT_AUDIO_RESOLUTION,
    JobGraphBuilder,
    PlanningError,
    ResolutionsFilter,
    UnknownTranscodingTypeError,
)
from transcode_planner.planning.framerate import (
    FPSSettings,
    InvalidFrameRateError,
    build_transcoding_fps_options,
    compute_output_fps,
    get_closest_framerate,
)
from transcode_planner.planning.locks import (
    FileVideoLocks,
    InProcessVideoLocks,
    LockAcquisitionError,
    VideoLockProvider,
    build_lock_provider,
)
from transcode_planner.planning.media import (
    LocalVideo,
    LocalVideoFile,
    Video,
    VideoFile,
)
from transcode_planner.planning.payloads import DefaultPayloadBuilders, PayloadBuilders
from transcode_planner.planning.resolutions import (
    build_original_file_resolution,
    compute_resolutions_to_transcode,
    to_even,
)

__all__ = [
    # Builder
    "DEFAULT_AUDIO_MERGE_FPS",
    "DEFAULT_AUDIO_RESOLUTION",
    "JobGraphBuilder",
    "PlanningError",
    "ResolutionsFilter",
    "UnknownTranscodingTypeError",
    # Frame rates
    "FPSSettings",
    "InvalidFrameRateError",
    "build_transcoding_fps_options",
    "compute_output_fps",
    "get_closest_framerate",
    # Locks
    "FileVideoLocks",
    "InProcessVideoLocks",
    "LockAcquisitionError",
    "VideoLockProvider",
    "build_lock_provider",
    # Media and payloads
    "DefaultPayloadBuilders",
    "LocalVideo",
    "LocalVideoFile",
    "PayloadBuilders",
    "Video",
    "VideoFile",
    # Ladder
    "build_original_file_resolution",
    "compute_resolutions_to_transcode",
    "to_even",
]
