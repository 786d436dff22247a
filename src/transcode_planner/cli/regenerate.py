"""CLI regenerate command: plan an explicit set of renditions."""

import json
from pathlib import Path

import click

from transcode_planner.cli.common import (
    format_staged_graph,
    open_local_video,
    planning_errors,
    resolve_config,
)
from transcode_planner.config import ConfigSource
from transcode_planner.domain.enums import OutputKind
from transcode_planner.domain.models import staged_graph_to_list
from transcode_planner.jobs import CollectingJobSink
from transcode_planner.planning import JobGraphBuilder


@click.command("regenerate")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--type",
    "-t",
    "transcoding_type",
    type=click.Choice([kind.value for kind in OutputKind]),
    required=True,
    help="Output kind to regenerate.",
)
@click.option(
    "--resolution",
    "-r",
    "resolutions",
    type=click.IntRange(min=0),
    multiple=True,
    required=True,
    help="Resolution to regenerate (repeatable).",
)
@click.option("--uuid", "video_uuid", default=None, help="Video identifier.")
@click.option(
    "--split-audio/--no-split-audio",
    "split_audio",
    default=None,
    help="Produce HLS audio as its own rendition.",
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
def regenerate_command(
    ctx: click.Context,
    file: Path,
    transcoding_type: str,
    resolutions: tuple[int, ...],
    video_uuid: str | None,
    split_audio: bool | None,
    output_format: str,
) -> None:
    """Print the job graph regenerating the given renditions of FILE.

    The highest resolution is produced first; the others are derived
    from it in a single stage.

    Examples:

        tplan regenerate upload.mp4 -t hls -r 1080 -r 480 -r 240
    """
    config = resolve_config(ctx, ConfigSource(split_audio_and_video=split_audio))
    video, video_file = open_local_video(config, file, video_uuid)

    sink = CollectingJobSink()
    builder = JobGraphBuilder(
        config, job_sink=sink, introspector=video_file.introspector
    )

    with planning_errors():
        payloads = builder.create_transcoding_jobs(
            transcoding_type,
            video,
            resolutions,
            is_new_video=False,
        )

    if output_format == "json":
        click.echo(
            json.dumps(
                {"video": video.uuid, "stages": staged_graph_to_list(payloads)},
                indent=2,
            )
        )
        return

    click.echo(format_staged_graph(payloads))
