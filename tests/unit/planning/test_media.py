"""Tests for LocalVideo and LocalVideoFile."""

from __future__ import annotations

from pathlib import Path

import pytest

from transcode_planner.introspector.interface import MediaIntrospectionError
from transcode_planner.planning.media import LocalVideo, LocalVideoFile


class TestLocalVideoFile:
    """Tests for LocalVideoFile."""

    def test_probes_lazily_once(self, fake_introspector, make_descriptor) -> None:
        descriptor = fake_introspector.add(make_descriptor())
        video_file = LocalVideoFile(descriptor.path, fake_introspector)

        assert fake_introspector.calls == []
        assert video_file.resolution == 1080
        assert video_file.fps == 60
        assert video_file.has_audio() is True
        assert fake_introspector.calls == [descriptor.path]

    def test_reload_probes_again(self, fake_introspector, make_descriptor) -> None:
        path = Path("/videos/upload.mp4")
        fake_introspector.add(make_descriptor(path=path, fps=30))
        video_file = LocalVideoFile(path, fake_introspector)
        assert video_file.fps == 30

        fake_introspector.add(make_descriptor(path=path, fps=25))
        video_file.reload()

        assert video_file.fps == 25
        assert len(fake_introspector.calls) == 2

    def test_is_audio(self, fake_introspector, make_audio_descriptor) -> None:
        descriptor = fake_introspector.add(make_audio_descriptor())
        video_file = LocalVideoFile(descriptor.path, fake_introspector)
        assert video_file.is_audio() is True

    def test_probe_error_propagates(self, fake_introspector) -> None:
        path = Path("/videos/broken.mp4")
        fake_introspector.fail(path)
        video_file = LocalVideoFile(path, fake_introspector)

        with pytest.raises(MediaIntrospectionError, match="corrupted"):
            video_file.reload()


class TestLocalVideo:
    """Tests for LocalVideo."""

    def test_requires_a_file(self) -> None:
        with pytest.raises(ValueError, match="at least one file"):
            LocalVideo("video-1", [])

    def test_max_fps_across_files(self, fake_introspector, make_descriptor) -> None:
        low = fake_introspector.add(make_descriptor(path=Path("/a.mp4"), fps=25))
        high = fake_introspector.add(make_descriptor(path=Path("/b.mp4"), fps=50))
        video = LocalVideo(
            "video-1",
            [
                LocalVideoFile(low.path, fake_introspector),
                LocalVideoFile(high.path, fake_introspector),
            ],
        )
        assert video.max_fps() == 50

    def test_is_audio_only(
        self, fake_introspector, make_descriptor, make_audio_descriptor
    ) -> None:
        audio = fake_introspector.add(make_audio_descriptor())
        video_file = fake_introspector.add(make_descriptor())

        audio_only = LocalVideo("a", [LocalVideoFile(audio.path, fake_introspector)])
        mixed = LocalVideo(
            "b",
            [
                LocalVideoFile(audio.path, fake_introspector),
                LocalVideoFile(video_file.path, fake_introspector),
            ],
        )
        assert audio_only.is_audio_only is True
        assert mixed.is_audio_only is False

    def test_reload_reloads_every_file(
        self, fake_introspector, make_descriptor
    ) -> None:
        first = fake_introspector.add(make_descriptor(path=Path("/a.mp4")))
        second = fake_introspector.add(make_descriptor(path=Path("/b.mp4")))
        video = LocalVideo(
            "video-1",
            [
                LocalVideoFile(first.path, fake_introspector),
                LocalVideoFile(second.path, fake_introspector),
            ],
        )
        video.reload()
        assert fake_introspector.calls == [first.path, second.path]
