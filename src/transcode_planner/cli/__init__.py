"""CLI module for the transcode planner."""

import logging
import sys
from pathlib import Path

import click

from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.config import (
    ConfigError,
    ProfileNotFoundError,
    build_logging_config,
    get_config,
    validate_config,
)
from transcode_planner.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="transcode-planner")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.tplan/config.toml).",
)
@click.option(
    "--profile",
    default=None,
    help="Named profile from ~/.tplan/profiles/.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    profile: str | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Transcode planner - plan the encoding jobs of a video."""
    ctx.ensure_object(dict)

    try:
        config = get_config(config_path=config_path, profile_name=profile)
    except ProfileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.PROFILE_NOT_FOUND)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)

    configure_logging(
        build_logging_config(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    )

    for problem in validate_config(config):
        logger.warning("Configuration: %s", problem)

    ctx.obj["config"] = config


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from transcode_planner.cli.encoders import encoders_command
    from transcode_planner.cli.plan import plan_command
    from transcode_planner.cli.profiles import profiles_group
    from transcode_planner.cli.regenerate import regenerate_command

    main.add_command(plan_command)
    main.add_command(regenerate_command)
    main.add_command(encoders_command)
    main.add_command(profiles_group)


_register_commands()
