"""CLI encoders command: show the encoder options selected for a rendition."""

import json
import logging
from pathlib import Path

import click

from transcode_planner.cli.common import (
    fail,
    get_context_config,
    open_local_video,
    planning_errors,
)
from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.domain.enums import StreamType, TranscodingContext
from transcode_planner.domain.models import SelectedEncoder
from transcode_planner.encoding import (
    EncoderOptionsBuilderParams,
    NoEncoderAvailableError,
    build_registry,
)
from transcode_planner.planning import compute_output_fps
from transcode_planner.tools import EncoderDetectionError, detect_available_encoders

logger = logging.getLogger(__name__)


def _selection_to_dict(selection: SelectedEncoder | None) -> dict | None:
    if selection is None:
        return None
    return {
        "encoder": selection.encoder,
        "copy": selection.result.is_stream_copy,
        "options": list(selection.result.options),
    }


@click.command("encoders")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--resolution",
    "-r",
    type=click.IntRange(min=1),
    required=True,
    help="Output resolution to build options for.",
)
@click.option(
    "--context",
    "context_name",
    type=click.Choice([context.value for context in TranscodingContext]),
    default=TranscodingContext.VOD.value,
    help="Transcoding context (default: vod).",
)
@click.option(
    "--copy-audio/--no-copy-audio",
    default=False,
    help="Allow copying a compliant audio stream.",
)
@click.option(
    "--detect/--no-detect",
    default=True,
    help="Restrict selection to the encoders of the local ffmpeg.",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def encoders_command(
    ctx: click.Context,
    file: Path,
    resolution: int,
    context_name: str,
    copy_audio: bool,
    detect: bool,
    json_output: bool,
) -> None:
    """Show the encoders and options selected to produce FILE at a resolution.

    Examples:

        tplan encoders upload.mp4 -r 720

        tplan encoders live.flv -r 480 --context live --no-detect
    """
    config = get_context_config(ctx)
    context = TranscodingContext(context_name)
    _, video_file = open_local_video(config, file, None)

    available = None
    if detect:
        try:
            available = detect_available_encoders(config.get_tool_path("ffmpeg"))
        except EncoderDetectionError as e:
            click.echo(f"Warning: {e}; assuming every encoder is available", err=True)

    with planning_errors():
        probe = video_file.descriptor
        fps: float = 0
        if probe.has_video:
            fps = compute_output_fps(
                probe.fps,
                resolution,
                is_origin_resolution=resolution == probe.resolution,
                context=context,
                config=config,
            )

    params = EncoderOptionsBuilderParams(
        resolution=resolution,
        fps=fps,
        input_bitrate=probe.video_bitrate,
        input_ratio=probe.ratio,
        probe=probe,
        can_copy_audio=copy_audio,
    )
    registry = build_registry(config.transcoding)

    selections: dict[str, SelectedEncoder | None] = {}
    for stream_type, present in (
        (StreamType.VIDEO, probe.has_video),
        (StreamType.AUDIO, probe.has_audio),
    ):
        if not present:
            selections[stream_type.value] = None
            continue
        try:
            selections[stream_type.value] = registry.select_encoder(
                context,
                stream_type,
                params,
                available=available,
                profile=config.transcoding.profile,
            )
        except NoEncoderAvailableError as e:
            fail(str(e), ExitCode.NO_ENCODER_AVAILABLE)

    if json_output:
        data = {
            "file": str(file),
            "context": context.value,
            "resolution": resolution,
            "fps": fps,
            **{key: _selection_to_dict(value) for key, value in selections.items()},
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"{file}: {resolution}p @ {fps:g} fps ({context.value})")
    for key, selection in selections.items():
        if selection is None:
            click.echo(f"  {key}: (no stream)")
        elif selection.result.is_stream_copy:
            click.echo(f"  {key}: {selection.encoder} (stream copy)")
        else:
            click.echo(f"  {key}: {selection.encoder}")
            for option in selection.result.options:
                click.echo(f"    {option}")
