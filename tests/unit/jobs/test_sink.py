"""Tests for job sinks."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from transcode_planner.domain.models import HLSPayload, OptimizePayload
from transcode_planner.jobs.exceptions import JobEnqueueError
from transcode_planner.jobs.sink import CollectingJobSink, JsonJobSink
from transcode_planner.planning.media import LocalVideo, LocalVideoFile


@pytest.fixture
def video(fake_introspector) -> LocalVideo:
    return LocalVideo("video-1", [LocalVideoFile(Path("/a.mp4"), fake_introspector)])


@pytest.fixture
def graph():
    root = OptimizePayload(
        video_uuid="video-1",
        resolution=1080,
        fps=30,
        is_new_video=True,
        input_file="/a.mp4",
        quick_transcode=False,
    )
    child = HLSPayload(
        video_uuid="video-1",
        resolution=720,
        fps=30,
        is_new_video=True,
        separated_audio=False,
    )
    return [[root], [child]]


class TestCollectingJobSink:
    """Tests for CollectingJobSink."""

    def test_records_submission(self, video, graph) -> None:
        sink = CollectingJobSink()
        sink.create_jobs(video=video, payloads=graph, user="alice")

        assert len(sink.submissions) == 1
        assert sink.last.video_uuid == "video-1"
        assert sink.last.payloads == graph
        assert sink.last.user == "alice"

    def test_copies_stages(self, video, graph) -> None:
        """Later mutation of the caller's lists does not alter the record."""
        sink = CollectingJobSink()
        sink.create_jobs(video=video, payloads=graph, user=None)
        graph[1].clear()

        assert len(sink.last.payloads[1]) == 1

    def test_last_without_submission(self) -> None:
        with pytest.raises(IndexError):
            CollectingJobSink().last


class TestJsonJobSink:
    """Tests for JsonJobSink."""

    def test_writes_one_document(self, video, graph) -> None:
        stream = io.StringIO()
        JsonJobSink(stream).create_jobs(video=video, payloads=graph, user=None)

        document = json.loads(stream.getvalue())
        assert document["video"] == "video-1"
        assert document["user"] is None
        assert [len(stage) for stage in document["stages"]] == [1, 1]
        assert document["stages"][0][0]["kind"] == "optimize"
        assert document["stages"][1][0]["flags"]["separatedAudio"] is False

    def test_compact_output_is_one_line(self, video, graph) -> None:
        stream = io.StringIO()
        sink = JsonJobSink(stream, indent=None)
        sink.create_jobs(video=video, payloads=graph, user=None)
        sink.create_jobs(video=video, payloads=graph, user=None)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert all(json.loads(line)["video"] == "video-1" for line in lines)


class TestJobEnqueueError:
    """Tests for JobEnqueueError."""

    def test_message(self) -> None:
        error = JobEnqueueError("video-1", "queue is down")
        assert error.video_uuid == "video-1"
        assert str(error) == "Cannot enqueue jobs of video video-1: queue is down"
