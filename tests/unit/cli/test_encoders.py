"""Tests for the tplan encoders command."""

import json
from pathlib import Path

from click.testing import CliRunner

from transcode_planner.cli import main
from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.tools import EncoderDetectionError

QUIET = ["--log-level", "error"]


class TestEncodersCommand:
    """Tests for encoder selection output."""

    def test_json_output(self, runner: CliRunner, probed_upload: Path) -> None:
        result = runner.invoke(
            main,
            [*QUIET, "encoders", str(probed_upload), "-r", "720", "--no-detect"]
            + ["--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["context"] == "vod"
        assert data["resolution"] == 720
        assert data["fps"] == 60
        assert data["video"]["encoder"] == "libx264"
        assert data["video"]["copy"] is False
        assert data["video"]["options"]
        assert data["audio"]["encoder"] == "libfdk_aac"

    def test_copy_audio(self, runner: CliRunner, probed_upload: Path) -> None:
        result = runner.invoke(
            main,
            [*QUIET, "encoders", str(probed_upload), "-r", "480", "--no-detect"]
            + ["--copy-audio"],
        )

        assert result.exit_code == 0, result.output
        assert "480p @ 30 fps (vod)" in result.output
        assert "audio: libfdk_aac (stream copy)" in result.output

    def test_detected_encoders_restrict_selection(
        self, runner: CliRunner, probed_upload: Path, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            "transcode_planner.cli.encoders.detect_available_encoders",
            lambda path=None: {"libx264": "V", "aac": "A"},
        )
        result = runner.invoke(
            main, [*QUIET, "encoders", str(probed_upload), "-r", "720", "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["audio"]["encoder"] == "aac"

    def test_detection_failure_warns(
        self, runner: CliRunner, probed_upload: Path, monkeypatch
    ) -> None:
        def broken(path=None):
            raise EncoderDetectionError("ffmpeg is not installed or not in PATH")

        monkeypatch.setattr(
            "transcode_planner.cli.encoders.detect_available_encoders", broken
        )
        result = runner.invoke(
            main, [*QUIET, "encoders", str(probed_upload), "-r", "720"]
        )

        assert result.exit_code == 0, result.output
        assert "assuming every encoder is available" in result.output

    def test_no_encoder_available(
        self, runner: CliRunner, probed_upload: Path, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            "transcode_planner.cli.encoders.detect_available_encoders",
            lambda path=None: {"aac": "A"},
        )
        result = runner.invoke(
            main, [*QUIET, "encoders", str(probed_upload), "-r", "720"]
        )

        assert result.exit_code == ExitCode.NO_ENCODER_AVAILABLE

    def test_audio_only_file(
        self,
        runner: CliRunner,
        probed_upload: Path,
        fake_introspector,
        make_audio_descriptor,
    ) -> None:
        fake_introspector.add(make_audio_descriptor(path=probed_upload))
        result = runner.invoke(
            main,
            [*QUIET, "encoders", str(probed_upload), "-r", "480", "--no-detect"]
            + ["--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["video"] is None
        assert data["audio"]["encoder"] == "libfdk_aac"

    def test_video_without_frame_size(
        self,
        runner: CliRunner,
        probed_upload: Path,
        fake_introspector,
        make_descriptor,
    ) -> None:
        """Streams reporting no width or height still get video options."""
        fake_introspector.add(
            make_descriptor(path=probed_upload, width=None, height=None, fps=30)
        )
        result = runner.invoke(
            main,
            [*QUIET, "encoders", str(probed_upload), "-r", "720", "--no-detect"]
            + ["--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["video"]["encoder"] == "libx264"
        assert any(option.startswith("-maxrate") for option in data["video"]["options"])
