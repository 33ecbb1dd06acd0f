"""
Configuration management commands for the Playtime Guard CLI.

Provides Click-based commands for inspecting and exporting configuration.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
import yaml

from .helpers import get_config

logger = logging.getLogger(__name__)


@click.group()
def config_commands() -> None:
    """Configuration management commands."""
    pass


@config_commands.command()
@click.option(
    "--format",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format",
)
@click.option("--section", help="Show specific configuration section")
@click.pass_context
def show(ctx: click.Context, format: str, section: Optional[str]) -> None:
    """Show current configuration."""
    data = get_config(ctx).to_dict()

    if section:
        if section not in data or not isinstance(data[section], dict):
            raise click.ClickException(f"Unknown section: {section}")
        data = data[section]

    if format == "json":
        click.echo(json.dumps(data, indent=2))
    elif format == "yaml":
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    else:
        click.echo("Playtime Guard Configuration")
        click.echo("=" * 40)
        for key, value in data.items():
            if isinstance(value, dict):
                click.echo(f"\n{key}:")
                for sub_key, sub_value in value.items():
                    click.echo(f"  {sub_key}: {sub_value}")
            else:
                click.echo(f"{key}: {value}")


@config_commands.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate current configuration."""
    config = get_config(ctx)
    warnings = []

    if not config.storage.data_dir.exists():
        warnings.append(f"Data directory does not exist yet: {config.storage.data_dir}")
    if config.api.host == "0.0.0.0" and config.environment.value == "production":  # nosec B104
        warnings.append(
            "Binding to 0.0.0.0 in production may be insecure. Consider using a reverse proxy."
        )

    click.echo("Configuration is valid")
    if warnings:
        click.echo("\nWarnings:")
        for warning in warnings:
            click.echo(f"  - {warning}")


@config_commands.command()
@click.argument("file_path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def save(ctx: click.Context, file_path: Path) -> None:
    """Save current configuration to a YAML file."""
    get_config(ctx).save(file_path)
    logger.info(f"Configuration saved to {file_path}")
    click.echo(f"Configuration saved to {file_path}")
