"""
Main CLI entry point for Playtime Guard.

Provides a unified command-line interface with subcommands for usage
accounting, access checks, the parent dashboard and configuration.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from .. import __version__
from ..core.config import Config
from ..core.exceptions import ConfigurationError
from ..core.logging import configure_logging
from .access import access_commands, fleet_commands
from .config import config_commands
from .profiles import account_commands, profile_commands
from .usage import usage_commands


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="PTG_CONFIG",
    help="YAML configuration file (default: PTG_* environment variables)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(
    ctx: click.Context, config_path: Optional[Path], verbose: bool, debug: bool
) -> None:
    """
    Playtime Guard CLI

    Daily usage limits, allowed hours and pause controls for kid profiles.
    """
    # Ensure that ctx.obj exists and is a dict
    ctx.ensure_object(dict)

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = "WARNING"
    configure_logging(level=level, json_format=False)
    logging.getLogger().setLevel(level)

    try:
        config = Config.from_file(config_path) if config_path else Config.from_env()
    except (ConfigurationError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug


cli.add_command(usage_commands, name="usage")
cli.add_command(access_commands, name="access")
cli.add_command(fleet_commands, name="fleet")
cli.add_command(profile_commands, name="profile")
cli.add_command(account_commands, name="account")
cli.add_command(config_commands, name="config")
