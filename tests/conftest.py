"""Shared test fixtures for the transcode planner."""

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from transcode_planner.config.loader import clear_config_cache
from transcode_planner.domain.models import MediaFileDescriptor
from transcode_planner.introspector.interface import MediaIntrospectionError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_data_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point TPLAN_DATA_DIR at a temporary directory for every test.

    Keeps tests away from ~/.tplan and from TPLAN_* variables of the host.
    """
    data_dir = tmp_path / "tplan-data"
    data_dir.mkdir()
    monkeypatch.setenv("TPLAN_DATA_DIR", str(data_dir))
    for var in (
        "TPLAN_CONFIG_PATH",
        "TPLAN_HLS_ENABLED",
        "TPLAN_WEB_VIDEOS_ENABLED",
        "TPLAN_SPLIT_AUDIO_AND_VIDEO",
        "TPLAN_FPS_MAX",
        "TPLAN_RESOLUTIONS",
        "TPLAN_PROFILE",
        "TPLAN_LOCK_DIR",
        "TPLAN_LOG_LEVEL",
        "TPLAN_LOG_FILE",
        "TPLAN_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_config_cache()
    yield data_dir
    clear_config_cache()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by a test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return FIXTURES_DIR / "ffprobe"


@pytest.fixture
def load_ffprobe_fixture(ffprobe_fixtures_dir: Path) -> Callable[[str], dict]:
    """Load an ffprobe JSON fixture by name (without .json extension)."""

    def _load(name: str) -> dict:
        return json.loads((ffprobe_fixtures_dir / f"{name}.json").read_text())

    return _load


@pytest.fixture
def make_descriptor() -> Callable[..., MediaFileDescriptor]:
    """Factory for descriptors of a compliant 1080p60 H.264/AAC upload."""

    def _make(**overrides: Any) -> MediaFileDescriptor:
        values: dict[str, Any] = {
            "path": Path("/videos/upload.mp4"),
            "container_format": "mov,mp4,m4a,3gp,3g2,mj2",
            "width": 1920,
            "height": 1080,
            "fps": 60.0,
            "video_codec": "h264",
            "pixel_format": "yuv420p",
            "video_bitrate": 5_000_000,
            "audio_codec": "aac",
            "audio_bitrate": 128_000,
            "channel_layout": "stereo",
            "duration_seconds": 120.0,
        }
        values.update(overrides)
        return MediaFileDescriptor(**values)

    return _make


@pytest.fixture
def make_audio_descriptor(
    make_descriptor: Callable[..., MediaFileDescriptor],
) -> Callable[..., MediaFileDescriptor]:
    """Factory for descriptors of an audio-only upload."""

    def _make(**overrides: Any) -> MediaFileDescriptor:
        values: dict[str, Any] = {
            "path": Path("/videos/podcast.m4a"),
            "width": None,
            "height": None,
            "fps": 0.0,
            "video_codec": None,
            "pixel_format": None,
            "video_bitrate": None,
        }
        values.update(overrides)
        return make_descriptor(**values)

    return _make


class FakeIntrospector:
    """In-memory MediaIntrospector keyed by path.

    Records every probed path; raises for paths registered as failing.
    """

    def __init__(self) -> None:
        self.descriptors: dict[Path, MediaFileDescriptor] = {}
        self.failures: dict[Path, str] = {}
        self.calls: list[Path] = []

    def add(self, descriptor: MediaFileDescriptor) -> MediaFileDescriptor:
        self.descriptors[descriptor.path] = descriptor
        return descriptor

    def fail(self, path: Path, message: str = "corrupted file") -> None:
        self.failures[path] = message

    def get_descriptor(self, path: Path) -> MediaFileDescriptor:
        self.calls.append(path)
        if path in self.failures:
            raise MediaIntrospectionError(self.failures[path])
        try:
            return self.descriptors[path]
        except KeyError:
            raise MediaIntrospectionError(f"File not found: {path}") from None


@pytest.fixture
def fake_introspector() -> FakeIntrospector:
    """Create an empty in-memory introspector."""
    return FakeIntrospector()
