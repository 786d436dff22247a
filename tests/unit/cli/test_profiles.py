"""Tests for the tplan profiles commands."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from transcode_planner.cli import main
from transcode_planner.cli.exit_codes import ExitCode


@pytest.fixture
def profiles_dir(isolated_data_dir: Path) -> Path:
    path = isolated_data_dir / "profiles"
    path.mkdir()
    (path / "mobile.yaml").write_text(
        "description: Small ladder\n"
        "transcoding:\n  resolutions: [240, 360]\n  split_audio_and_video: true\n"
    )
    (path / "broken.yaml").write_text("transcoding:\n  fps_maxx: 30\n")
    return path


class TestProfilesList:
    """Tests for profiles list."""

    def test_empty(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["profiles", "list"])

        assert result.exit_code == 0
        assert "No profiles found" in result.output

    def test_table(self, runner: CliRunner, profiles_dir: Path) -> None:
        result = runner.invoke(main, ["profiles", "list"])

        assert result.exit_code == 0
        assert "mobile" in result.output
        assert "Small ladder" in result.output
        assert "(error:" in result.output

    def test_json(self, runner: CliRunner, profiles_dir: Path) -> None:
        result = runner.invoke(
            main, ["--log-level", "error", "profiles", "list", "--json"]
        )

        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [row["name"] for row in rows] == ["broken", "mobile"]
        assert "error" in rows[0]
        assert rows[1]["transcoding"]["resolutions"] == [240, 360]


class TestProfilesShow:
    """Tests for profiles show."""

    def test_show(self, runner: CliRunner, profiles_dir: Path) -> None:
        result = runner.invoke(main, ["profiles", "show", "mobile"])

        assert result.exit_code == 0
        assert "Profile: mobile" in result.output
        assert "[transcoding]" in result.output
        assert "split_audio_and_video: True" in result.output

    def test_show_json(self, runner: CliRunner, profiles_dir: Path) -> None:
        result = runner.invoke(main, ["profiles", "show", "mobile", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["name"] == "mobile"
        assert "live" not in data

    def test_not_found_lists_available(
        self, runner: CliRunner, profiles_dir: Path
    ) -> None:
        result = runner.invoke(main, ["profiles", "show", "nope"])

        assert result.exit_code == ExitCode.PROFILE_NOT_FOUND
        assert "- mobile" in result.output

    def test_invalid_profile(self, runner: CliRunner, profiles_dir: Path) -> None:
        result = runner.invoke(main, ["profiles", "show", "broken"])
        assert result.exit_code == ExitCode.CONFIG_ERROR
