"""Tests for per-video lock providers."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from transcode_planner.planning.locks import (
    FileVideoLocks,
    InProcessVideoLocks,
    LockAcquisitionError,
    build_lock_provider,
)


class TestInProcessVideoLocks:
    """Tests for InProcessVideoLocks."""

    def test_lock_and_relock(self) -> None:
        locks = InProcessVideoLocks(timeout=0.05)
        with locks.lock("video-1"):
            pass
        with locks.lock("video-1"):
            pass

    def test_busy_lock_times_out(self) -> None:
        locks = InProcessVideoLocks(timeout=0.05)
        with locks.lock("video-1"):
            with pytest.raises(LockAcquisitionError) as exc_info:
                with locks.lock("video-1"):
                    pass

        assert exc_info.value.video_uuid == "video-1"

    def test_videos_are_independent(self) -> None:
        locks = InProcessVideoLocks(timeout=0.05)
        with locks.lock("video-1"):
            with locks.lock("video-2"):
                pass

    def test_released_on_exception(self) -> None:
        locks = InProcessVideoLocks(timeout=0.05)
        with pytest.raises(RuntimeError):
            with locks.lock("video-1"):
                raise RuntimeError("boom")

        with locks.lock("video-1"):
            pass

    def test_waits_for_other_thread(self) -> None:
        """Without a timeout a second planner waits for the first one."""
        locks = InProcessVideoLocks()
        held = threading.Event()
        release = threading.Event()
        order: list[str] = []

        def first() -> None:
            with locks.lock("video-1"):
                held.set()
                release.wait(timeout=5)
                order.append("first")

        thread = threading.Thread(target=first)
        thread.start()
        held.wait(timeout=5)
        release.set()
        with locks.lock("video-1"):
            order.append("second")
        thread.join(timeout=5)

        assert order == ["first", "second"]

    def test_idle_entries_are_dropped(self) -> None:
        """The registry forgets a video once its lock is released."""
        locks = InProcessVideoLocks(timeout=0.05)
        for index in range(100):
            with locks.lock(f"video-{index}"):
                assert f"video-{index}" in locks._locks

        assert locks._locks == {}
        assert locks._users == {}

    def test_entry_kept_while_waiting(self) -> None:
        """A timed out waiter does not drop the entry of the holder."""
        locks = InProcessVideoLocks(timeout=0.05)
        with locks.lock("video-1"):
            with pytest.raises(LockAcquisitionError):
                with locks.lock("video-1"):
                    pass
            assert locks._users == {"video-1": 1}

        assert locks._locks == {}


class TestFileVideoLocks:
    """Tests for FileVideoLocks."""

    def test_creates_directory_and_lock_file(self, tmp_path: Path) -> None:
        directory = tmp_path / "locks"
        locks = FileVideoLocks(directory)

        with locks.lock("video-1"):
            assert (directory / "video-1.lock").exists()

    def test_second_holder_fails(self, tmp_path: Path) -> None:
        """Another process (or provider) cannot take a held lock."""
        first = FileVideoLocks(tmp_path)
        second = FileVideoLocks(tmp_path)

        with first.lock("video-1"):
            with pytest.raises(LockAcquisitionError, match="locked by another"):
                with second.lock("video-1"):
                    pass

    def test_released_after_exit(self, tmp_path: Path) -> None:
        first = FileVideoLocks(tmp_path)
        second = FileVideoLocks(tmp_path)

        with pytest.raises(RuntimeError):
            with first.lock("video-1"):
                raise RuntimeError("boom")

        with second.lock("video-1"):
            pass

    def test_rejects_unsafe_uuid(self, tmp_path: Path) -> None:
        locks = FileVideoLocks(tmp_path)
        with pytest.raises(LockAcquisitionError, match="invalid characters"):
            with locks.lock("../escape"):
                pass

    def test_lock_path(self, tmp_path: Path) -> None:
        locks = FileVideoLocks(tmp_path)
        assert locks.lock_path("abc-123") == tmp_path / "abc-123.lock"


class TestBuildLockProvider:
    """Tests for build_lock_provider function."""

    def test_file_locks_with_directory(self, tmp_path: Path) -> None:
        assert isinstance(build_lock_provider(tmp_path), FileVideoLocks)

    def test_in_process_without_directory(self) -> None:
        assert isinstance(build_lock_provider(None, 1.0), InProcessVideoLocks)
