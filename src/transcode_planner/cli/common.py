"""Helpers shared by tplan commands."""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import NoReturn

import click

from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.config import (
    ConfigError,
    ConfigSource,
    PlannerConfig,
    apply_cli_overrides,
)
from transcode_planner.domain.models import StagedGraph
from transcode_planner.introspector import FFprobeIntrospector, MediaIntrospectionError
from transcode_planner.jobs import JobEnqueueError
from transcode_planner.planning import (
    InvalidFrameRateError,
    LocalVideo,
    LocalVideoFile,
    LockAcquisitionError,
    PlanningError,
)

logger = logging.getLogger(__name__)


def fail(message: str, code: ExitCode) -> NoReturn:
    """Print an error to stderr and exit with the given code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def get_context_config(ctx: click.Context) -> PlannerConfig:
    """Return the configuration loaded by the main group."""
    return ctx.find_root().obj["config"]


def resolve_config(ctx: click.Context, cli_source: ConfigSource) -> PlannerConfig:
    """Apply command line overrides to the loaded configuration."""
    try:
        return apply_cli_overrides(get_context_config(ctx), cli_source)
    except (ConfigError, ValueError) as e:
        fail(str(e), ExitCode.CONFIG_ERROR)


def default_video_uuid(path: Path) -> str:
    """Stable uuid for a local file, so repeated runs share one lock."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, path.resolve().as_uri()))


def open_local_video(
    config: PlannerConfig, file_path: Path, video_uuid: str | None
) -> tuple[LocalVideo, LocalVideoFile]:
    """Wrap a local file as a video with a single file.

    Exits with TARGET_NOT_FOUND or FFPROBE_NOT_FOUND when unusable.
    """
    if not file_path.exists():
        fail(f"File not found: {file_path}", ExitCode.TARGET_NOT_FOUND)

    try:
        introspector = FFprobeIntrospector(config.get_tool_path("ffprobe"))
    except MediaIntrospectionError as e:
        fail(str(e), ExitCode.FFPROBE_NOT_FOUND)

    video_file = LocalVideoFile(file_path, introspector)
    video = LocalVideo(video_uuid or default_video_uuid(file_path), [video_file])
    return video, video_file


@contextmanager
def planning_errors() -> Iterator[None]:
    """Map planning exceptions to exit codes."""
    try:
        yield
    except LockAcquisitionError as e:
        fail(str(e), ExitCode.FILE_LOCKED)
    except MediaIntrospectionError as e:
        fail(f"Could not probe file: {e}", ExitCode.PARSE_ERROR)
    except InvalidFrameRateError as e:
        fail(str(e), ExitCode.INVALID_FRAME_RATE)
    except JobEnqueueError as e:
        fail(str(e), ExitCode.ENQUEUE_FAILED)
    except PlanningError as e:
        fail(str(e), ExitCode.OPERATION_FAILED)


def format_staged_graph(payloads: StagedGraph) -> str:
    """Render a staged graph as indented human readable text."""
    lines: list[str] = []
    for index, stage in enumerate(payloads):
        label = "root" if index == 0 else f"after stage {index - 1}"
        lines.append(f"Stage {index} ({label}):")
        if not stage:
            lines.append("  (no jobs)")
        for payload in stage:
            data = payload.to_dict()
            flags = " ".join(
                f"{key}={value}" for key, value in sorted(data["flags"].items())
            )
            resolution = f"{payload.resolution}p" if payload.resolution else "audio"
            line = f"  {data['kind']:<12} {resolution:>6} @ {payload.fps:g} fps"
            lines.append(f"{line}  {flags}" if flags else line)
    return "\n".join(lines)
