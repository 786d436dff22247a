"""Video and video file accessors used by the job graph builder.

The planner only reads videos. The Protocols describe what it needs from
the hosting platform; LocalVideo and LocalVideoFile implement them over
files on disk for the command line.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from transcode_planner.domain.enums import VideoResolution
from transcode_planner.domain.models import MediaFileDescriptor
from transcode_planner.introspector.interface import MediaIntrospector

logger = logging.getLogger(__name__)


class VideoFile(Protocol):
    """One stored file of a video."""

    @property
    def path(self) -> Path: ...

    @property
    def resolution(self) -> int: ...

    @property
    def fps(self) -> float: ...

    def has_audio(self) -> bool: ...

    def is_audio(self) -> bool:
        """Return True for an audio-only file."""
        ...

    def reload(self) -> None:
        """Refresh the file from durable state."""
        ...


class Video(Protocol):
    """A video as seen by the planner."""

    @property
    def uuid(self) -> str: ...

    @property
    def is_audio_only(self) -> bool: ...

    def max_fps(self) -> float:
        """Highest frame rate across the video's files."""
        ...

    def reload(self) -> None:
        """Refresh the video from durable state."""
        ...


class LocalVideoFile:
    """A media file on disk, described by probing it.

    reload() probes the file again, so changes made while waiting for the
    video lock are picked up.
    """

    def __init__(self, path: Path, introspector: MediaIntrospector) -> None:
        self._path = path
        self._introspector = introspector
        self._descriptor: MediaFileDescriptor | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def introspector(self) -> MediaIntrospector:
        return self._introspector

    @property
    def descriptor(self) -> MediaFileDescriptor:
        """Probe result, probing on first access.

        Raises:
            MediaIntrospectionError: If the file cannot be probed.
        """
        if self._descriptor is None:
            self.reload()
        assert self._descriptor is not None
        return self._descriptor

    @property
    def resolution(self) -> int:
        return self.descriptor.resolution

    @property
    def fps(self) -> float:
        return self.descriptor.fps

    def has_audio(self) -> bool:
        return self.descriptor.has_audio

    def is_audio(self) -> bool:
        return self.resolution == VideoResolution.H_NOVIDEO

    def reload(self) -> None:
        self._descriptor = self._introspector.get_descriptor(self._path)


class LocalVideo:
    """A video made of local files."""

    def __init__(self, uuid: str, files: Sequence[LocalVideoFile]) -> None:
        if not files:
            raise ValueError("A video needs at least one file")
        self._uuid = uuid
        self._files = list(files)

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def files(self) -> list[LocalVideoFile]:
        return list(self._files)

    @property
    def is_audio_only(self) -> bool:
        return all(video_file.is_audio() for video_file in self._files)

    def max_fps(self) -> float:
        return max(video_file.fps for video_file in self._files)

    def reload(self) -> None:
        logger.debug("Reloading %d file(s) of video %s", len(self._files), self._uuid)
        for video_file in self._files:
            video_file.reload()
