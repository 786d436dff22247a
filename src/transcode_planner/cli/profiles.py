"""CLI commands for transcoding profiles."""

import json
from typing import Any

import click

from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.config import (
    LiveTranscodingConfig,
    Profile,
    ProfileError,
    ProfileNotFoundError,
    TranscodingConfig,
    list_profiles,
    load_profile,
)
from transcode_planner.config.profiles import get_profiles_directory


def _transcoding_to_dict(config: TranscodingConfig) -> dict[str, Any]:
    return {
        "hls_enabled": config.hls_enabled,
        "web_videos_enabled": config.web_videos_enabled,
        "split_audio_and_video": config.split_audio_and_video,
        "fps_max": config.fps_max,
        "always_transcode_original_resolution": (
            config.always_transcode_original_resolution
        ),
        "resolutions": sorted(config.resolutions),
        "profile": config.profile,
        "video_encoders": list(config.video_encoders or []) or None,
        "audio_encoders": list(config.audio_encoders or []) or None,
    }


def _live_to_dict(config: LiveTranscodingConfig) -> dict[str, Any]:
    return {"fps_max": config.fps_max, "resolutions": sorted(config.resolutions)}


def _profile_to_dict(profile: Profile) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": profile.name,
        "description": profile.description,
    }
    if profile.transcoding:
        data["transcoding"] = _transcoding_to_dict(profile.transcoding)
    if profile.live:
        data["live"] = _live_to_dict(profile.live)
    return data


@click.group("profiles")
def profiles_group() -> None:
    """Manage named transcoding profiles."""


@profiles_group.command("list")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
def list_profiles_cmd(json_output: bool) -> None:
    """List available profiles.

    Profiles are stored in ~/.tplan/profiles/ as YAML files.
    """
    profile_names = list_profiles()

    rows = []
    for name in profile_names:
        try:
            rows.append(_profile_to_dict(load_profile(name)))
        except ProfileError as e:
            rows.append({"name": name, "error": str(e)})

    if json_output:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo(f"No profiles found in {get_profiles_directory()}")
        click.echo("\nTo create a profile, add a YAML file to the profiles directory.")
        click.echo("Example: ~/.tplan/profiles/mobile.yaml")
        return

    click.echo(f"{'NAME':<20} {'DESCRIPTION':<50}")
    click.echo("-" * 71)
    for row in rows:
        description = row.get("description") or "-"
        if "error" in row:
            description = f"(error: {row['error']})"
        click.echo(f"{row['name']:<20} {description[:50]:<50}")


@profiles_group.command("show")
@click.argument("profile_name")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
def show_profile(profile_name: str, json_output: bool) -> None:
    """Show the settings of a profile.

    PROFILE_NAME is the name of the profile (without .yaml extension).
    """
    try:
        profile = load_profile(profile_name)
    except ProfileNotFoundError:
        click.echo(f"Error: Profile '{profile_name}' not found.", err=True)
        available = list_profiles()
        if available:
            click.echo("\nAvailable profiles:", err=True)
            for name in available:
                click.echo(f"  - {name}", err=True)
        raise SystemExit(ExitCode.PROFILE_NOT_FOUND)
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR)

    data = _profile_to_dict(profile)
    if json_output:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Profile: {profile.name}")
    click.echo(f"Description: {profile.description or '-'}")
    for section in ("transcoding", "live"):
        if section not in data:
            continue
        click.echo(f"\n[{section}]")
        for key, value in data[section].items():
            click.echo(f"  {key}: {value}")
