"""Per-video lock providers.

A planning invocation holds the lock of its video from before the video is
reloaded until the job graph is built. Locks are context managers, so they
are released exactly once on every exit path.
"""

from __future__ import annotations

import fcntl
import logging
import re
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class LockAcquisitionError(Exception):
    """Raised when a video lock cannot be acquired."""

    def __init__(self, video_uuid: str, reason: str) -> None:
        self.video_uuid = video_uuid
        super().__init__(f"Cannot lock video {video_uuid}: {reason}")


class VideoLockProvider(Protocol):
    """Hands out exclusive locks keyed by video uuid."""

    def lock(self, video_uuid: str) -> AbstractContextManager[None]:
        """Return a context manager holding the video lock while entered.

        Raises:
            LockAcquisitionError: On entering, if the lock cannot be taken.
        """
        ...


class InProcessVideoLocks:
    """One threading.Lock per video uuid, shared by every planner thread.

    Entries are reference counted and dropped once no thread holds or waits
    for them, so the registry only tracks videos being planned.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the provider.

        Args:
            timeout: Seconds to wait for a busy lock. None waits forever.
        """
        self._timeout = timeout
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}
        self._registry_lock = threading.Lock()

    def _acquire_entry(self, video_uuid: str) -> threading.Lock:
        with self._registry_lock:
            self._users[video_uuid] = self._users.get(video_uuid, 0) + 1
            return self._locks.setdefault(video_uuid, threading.Lock())

    def _release_entry(self, video_uuid: str) -> None:
        with self._registry_lock:
            self._users[video_uuid] -= 1
            if not self._users[video_uuid]:
                del self._users[video_uuid]
                del self._locks[video_uuid]

    @contextmanager
    def lock(self, video_uuid: str) -> Iterator[None]:
        video_lock = self._acquire_entry(video_uuid)
        try:
            timeout = -1 if self._timeout is None else self._timeout
            if not video_lock.acquire(timeout=timeout):
                raise LockAcquisitionError(
                    video_uuid, f"still busy after {self._timeout}s"
                )
            logger.debug("Locked video %s", video_uuid)
            try:
                yield
            finally:
                video_lock.release()
                logger.debug("Released video %s", video_uuid)
        finally:
            self._release_entry(video_uuid)


class FileVideoLocks:
    """fcntl locks on <directory>/<uuid>.lock, shared across processes.

    Acquisition is non-blocking: a video locked elsewhere fails immediately.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def lock_path(self, video_uuid: str) -> Path:
        """Path of the lock file for a video.

        Raises:
            LockAcquisitionError: If the uuid is not usable as a file name.
        """
        if not _SAFE_KEY.match(video_uuid):
            raise LockAcquisitionError(video_uuid, "invalid characters in uuid")
        return self._directory / f"{video_uuid}{LOCK_SUFFIX}"

    @contextmanager
    def lock(self, video_uuid: str) -> Iterator[None]:
        lock_path = self.lock_path(video_uuid)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            lock_file = open(lock_path, "w", encoding="utf-8")
        except OSError as e:
            raise LockAcquisitionError(video_uuid, str(e)) from e

        try:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except OSError as e:
                raise LockAcquisitionError(
                    video_uuid, "locked by another operation"
                ) from e

            logger.debug("Locked video %s via %s", video_uuid, lock_path)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                logger.debug("Released video %s", video_uuid)
        finally:
            lock_file.close()


def build_lock_provider(
    directory: Path | None, timeout: float | None = None
) -> VideoLockProvider:
    """File locks when a lock directory is configured, in-process otherwise."""
    if directory is not None:
        return FileVideoLocks(directory)
    return InProcessVideoLocks(timeout=timeout)
