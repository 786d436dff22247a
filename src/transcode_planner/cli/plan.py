"""CLI plan command: plan every rendition of a media file."""

import json
import logging
from pathlib import Path

import click

from transcode_planner.cli.common import (
    format_staged_graph,
    open_local_video,
    planning_errors,
    resolve_config,
)
from transcode_planner.config import ConfigSource
from transcode_planner.domain.models import staged_graph_to_list
from transcode_planner.jobs import CollectingJobSink
from transcode_planner.planning import JobGraphBuilder, build_lock_provider

logger = logging.getLogger(__name__)


@click.command("plan")
@click.argument("file", type=click.Path(path_type=Path))
@click.option("--uuid", "video_uuid", default=None, help="Video identifier.")
@click.option(
    "--replace",
    is_flag=True,
    help="Plan for a replaced file instead of a new video.",
)
@click.option("--hls/--no-hls", "hls_enabled", default=None, help="HLS output.")
@click.option(
    "--web-videos/--no-web-videos",
    "web_videos_enabled",
    default=None,
    help="Flat web video output.",
)
@click.option(
    "--split-audio/--no-split-audio",
    "split_audio",
    default=None,
    help="Produce HLS audio as its own rendition.",
)
@click.option("--fps-max", type=click.IntRange(min=1), default=None)
@click.option(
    "--resolution",
    "-r",
    "resolutions",
    type=int,
    multiple=True,
    help="Enabled ladder resolution (repeatable).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def plan_command(
    ctx: click.Context,
    file: Path,
    video_uuid: str | None,
    replace: bool,
    hls_enabled: bool | None,
    web_videos_enabled: bool | None,
    split_audio: bool | None,
    fps_max: int | None,
    resolutions: tuple[int, ...],
    output_format: str,
) -> None:
    """Probe FILE and print the staged job graph planned for it.

    Examples:

        # Plan with the configured policy
        tplan plan upload.mp4

        # HLS with split audio, custom ladder, as JSON
        tplan plan upload.mp4 --split-audio -r 720 -r 360 -r 0 -f json
    """
    config = resolve_config(
        ctx,
        ConfigSource(
            hls_enabled=hls_enabled,
            web_videos_enabled=web_videos_enabled,
            split_audio_and_video=split_audio,
            fps_max=fps_max,
            resolutions=frozenset(resolutions) if resolutions else None,
        ),
    )
    video, video_file = open_local_video(config, file, video_uuid)

    sink = CollectingJobSink()
    builder = JobGraphBuilder(
        config,
        job_sink=sink,
        introspector=video_file.introspector,
        lock_provider=build_lock_provider(
            config.locks.directory, config.locks.timeout_seconds
        ),
    )

    with planning_errors():
        payloads = builder.create_optimize_or_merge_audio_jobs(
            video,
            video_file,
            is_new_video=not replace,
            user=None,
        )

    if output_format == "json":
        click.echo(
            json.dumps(
                {"video": video.uuid, "stages": staged_graph_to_list(payloads)},
                indent=2,
            )
        )
        return

    click.echo(f"Video {video.uuid} ({file})")
    click.echo(format_staged_graph(payloads))
