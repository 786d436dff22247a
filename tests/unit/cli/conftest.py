"""Fixtures for CLI tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from transcode_planner.domain.models import MediaFileDescriptor


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def upload(tmp_path: Path) -> Path:
    """An (empty) uploaded file; its probe result comes from the fake."""
    path = tmp_path / "upload.mp4"
    path.write_bytes(b"\x00")
    return path


@pytest.fixture
def probed_upload(
    upload: Path,
    fake_introspector,
    make_descriptor: Callable[..., MediaFileDescriptor],
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """The upload probed as a 1080p60 H.264/AAC file through the fake."""
    fake_introspector.add(make_descriptor(path=upload))
    monkeypatch.setattr(
        "transcode_planner.cli.common.FFprobeIntrospector",
        lambda *args, **kwargs: fake_introspector,
    )
    return upload
