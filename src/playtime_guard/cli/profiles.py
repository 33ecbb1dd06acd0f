"""
Kid profile and parent account commands for the Playtime Guard CLI.
"""

from typing import Optional, Tuple

import click

from ..features.time_controls import KidProfile
from ..features.time_controls.types import TimeOfDayValue
from .helpers import echo_json, open_service


def _time_of_day(value: str) -> TimeOfDayValue:
    # "20" is an hour, "20:30" is HH:MM
    return int(value) if value.isdigit() else value


@click.group()
def profile_commands() -> None:
    """Kid profile commands."""
    pass


@profile_commands.command("set")
@click.argument("kid_profile_id")
@click.option("--user", "user_id", required=True, help="Owning parent account")
@click.option("--name", default="", help="Kid display name")
@click.option("--daily-limit", type=int, help="Daily limit in minutes")
@click.option("--weekend-limit", type=int, help="Saturday/Sunday limit in minutes")
@click.option(
    "--window",
    nargs=2,
    type=str,
    default=None,
    help="Allowed hours as START END (hour or HH:MM)",
)
@click.option("--paused/--active", default=False, help="Parent lockout")
@click.pass_context
def set_profile(
    ctx: click.Context,
    kid_profile_id: str,
    user_id: str,
    name: str,
    daily_limit: Optional[int],
    weekend_limit: Optional[int],
    window: Optional[Tuple[str, str]],
    paused: bool,
) -> None:
    """Create or replace a kid profile."""
    profile = KidProfile(
        id=kid_profile_id,
        user_id=user_id,
        name=name or kid_profile_id,
        paused=paused,
        daily_limit_enabled=daily_limit is not None,
        daily_limit_minutes=daily_limit,
        weekend_limit_minutes=weekend_limit,
    )
    if window:
        profile.time_window_enabled = True
        profile.allowed_start = _time_of_day(window[0])
        profile.allowed_end = _time_of_day(window[1])

    with open_service(ctx) as service:
        service.profiles.save_profile(profile)
    click.echo(f"Saved kid profile {kid_profile_id}")


@profile_commands.command()
@click.argument("kid_profile_id")
@click.pass_context
def show(ctx: click.Context, kid_profile_id: str) -> None:
    """Show a kid profile as JSON."""
    with open_service(ctx) as service:
        echo_json(service.profiles.get_profile(kid_profile_id).to_dict())


@profile_commands.command("list")
@click.argument("user_id")
@click.pass_context
def list_profiles(ctx: click.Context, user_id: str) -> None:
    """List the kid profiles of a parent account."""
    with open_service(ctx) as service:
        profiles = service.profiles.list_profiles(user_id)

    if not profiles:
        click.echo(f"No kid profiles for {user_id}")
    for profile in profiles:
        click.echo(f"{profile.id}: {profile.name}")


@profile_commands.command()
@click.argument("kid_profile_id")
@click.pass_context
def pause(ctx: click.Context, kid_profile_id: str) -> None:
    """Block all access for a kid."""
    with open_service(ctx) as service:
        service.profiles.set_paused(kid_profile_id, True)
    click.echo(f"Paused {kid_profile_id}")


@profile_commands.command()
@click.argument("kid_profile_id")
@click.pass_context
def resume(ctx: click.Context, kid_profile_id: str) -> None:
    """Lift the parent pause for a kid."""
    with open_service(ctx) as service:
        service.profiles.set_paused(kid_profile_id, False)
    click.echo(f"Resumed {kid_profile_id}")


@profile_commands.command()
@click.argument("kid_profile_id")
@click.pass_context
def delete(ctx: click.Context, kid_profile_id: str) -> None:
    """Delete a kid profile. Recorded usage is kept."""
    with open_service(ctx) as service:
        service.profiles.delete_profile(kid_profile_id)
    click.echo(f"Deleted kid profile {kid_profile_id}")


@click.group()
def account_commands() -> None:
    """Parent account commands."""
    pass


@account_commands.command()
@click.argument("user_id")
@click.argument("zone", required=False)
@click.pass_context
def timezone(ctx: click.Context, user_id: str, zone: Optional[str]) -> None:
    """Set the IANA zone a family's days are counted in (omit to clear)."""
    with open_service(ctx) as service:
        service.profiles.set_account_timezone(user_id, zone)
    click.echo(f"Timezone for {user_id}: {zone or 'default'}")
