"""
Usage accounting commands for the Playtime Guard CLI.
"""

from typing import Optional

import click

from .helpers import echo_json, open_service, parse_instant


@click.group()
def usage_commands() -> None:
    """Daily usage commands."""
    pass


@usage_commands.command()
@click.argument("kid_profile_id")
@click.argument("minutes", type=float)
@click.option("--at", "clock", callback=parse_instant, help="Record as of this instant")
@click.pass_context
def add(ctx: click.Context, kid_profile_id: str, minutes: float, clock) -> None:
    """Add elapsed minutes to today's counter."""
    with open_service(ctx, clock) as service:
        total = service.add_usage(kid_profile_id, minutes)
    click.echo(f"{kid_profile_id}: {total:g} minutes used today")


@usage_commands.command()
@click.argument("kid_profile_id")
@click.option("--at", "clock", callback=parse_instant, help="Evaluate at this instant")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def today(ctx: click.Context, kid_profile_id: str, clock, as_json: bool) -> None:
    """Show today's usage."""
    with open_service(ctx, clock) as service:
        usage = service.get_usage_today(kid_profile_id)

    if as_json:
        echo_json(usage.to_dict())
    else:
        click.echo(f"{usage.date}: {usage.total_minutes_used:g} minutes")


@usage_commands.command()
@click.argument("kid_profile_id")
@click.option("--at", "clock", callback=parse_instant, help="Reset the day of this instant")
@click.pass_context
def reset(ctx: click.Context, kid_profile_id: str, clock) -> None:
    """Zero today's usage."""
    with open_service(ctx, clock) as service:
        service.reset_daily_usage(kid_profile_id)
    click.echo(f"Daily usage reset for {kid_profile_id}")


@usage_commands.command()
@click.argument("kid_profile_id")
@click.option("--days", type=int, default=None, help="Number of past days to include")
@click.option("--at", "clock", callback=parse_instant, help="Count back from this instant")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def history(
    ctx: click.Context, kid_profile_id: str, days: Optional[int], clock, as_json: bool
) -> None:
    """Show daily usage records, newest first."""
    with open_service(ctx, clock) as service:
        records = service.get_usage_history(kid_profile_id, days)

    if as_json:
        echo_json([record.to_dict() for record in records])
        return

    if not records:
        click.echo("No usage recorded")
    for record in records:
        click.echo(f"{record.date}: {record.total_minutes_used:g} minutes")
