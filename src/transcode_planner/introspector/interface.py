"""MediaIntrospector interface for probing media stream parameters."""

from pathlib import Path
from typing import Protocol

from transcode_planner.domain.models import MediaFileDescriptor


class MediaIntrospectionError(Exception):
    """Raised when media introspection fails."""


class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations.

    The planner probes the input once per invocation, after taking the video
    lock and before any payload is built.
    """

    def get_descriptor(self, path: Path) -> MediaFileDescriptor:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            MediaFileDescriptor with the first video and audio streams.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        ...
