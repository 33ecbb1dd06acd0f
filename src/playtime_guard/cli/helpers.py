"""
Shared helpers for the Playtime Guard CLI commands.
"""

import json
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generator, Optional

import click

from ..core.clock import Clock, FixedClock
from ..core.config import Config
from ..core.exceptions import PlaytimeGuardError
from ..features.time_controls import TimeControlService, create_time_control_service


def get_config(ctx: click.Context) -> Config:
    """Configuration loaded by the root command."""
    return ctx.find_root().obj["config"]


@contextmanager
def open_service(
    ctx: click.Context, clock: Optional[Clock] = None
) -> Generator[TimeControlService, None, None]:
    """Build a service for one command and report domain errors as CLI errors."""
    try:
        service = create_time_control_service(get_config(ctx), clock=clock)
    except PlaytimeGuardError as e:
        raise click.ClickException(str(e)) from e

    try:
        yield service
    except PlaytimeGuardError as e:
        raise click.ClickException(str(e)) from e
    finally:
        service.store.close()


def parse_instant(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[FixedClock]:
    """Click callback turning an ISO-8601 ``--at`` value into a fixed clock."""
    if value is None:
        return None
    try:
        instant = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value}")
    if instant.tzinfo is None:
        raise click.BadParameter("timestamp must include a UTC offset, e.g. +00:00")
    return FixedClock(instant)


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))
