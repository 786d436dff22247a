"""Domain models and enums for transcode planning.

Usage:
    from transcode_planner.domain import MediaFileDescriptor, HLSPayload
    from transcode_planner.domain import VideoResolution, TranscodingContext
"""

from .enums import (
    JobKind,
    OutputKind,
    StreamType,
    TranscodingContext,
    VideoResolution,
)
from .models import (
    EncoderOptionsResult,
    HLSPayload,
    JobPayload,
    MediaFileDescriptor,
    MergeAudioPayload,
    OptimizePayload,
    SelectedEncoder,
    StagedGraph,
    WebVideoPayload,
    staged_graph_to_list,
)

__all__ = [
    # Models
    "EncoderOptionsResult",
    "MediaFileDescriptor",
    "SelectedEncoder",
    # Payloads
    "HLSPayload",
    "JobPayload",
    "MergeAudioPayload",
    "OptimizePayload",
    "StagedGraph",
    "WebVideoPayload",
    "staged_graph_to_list",
    # Enums
    "JobKind",
    "OutputKind",
    "StreamType",
    "TranscodingContext",
    "VideoResolution",
]
