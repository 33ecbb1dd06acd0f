"""
Access decision and dashboard commands for the Playtime Guard CLI.
"""

import click

from .helpers import echo_json, open_service, parse_instant


@click.group()
def access_commands() -> None:
    """Access decision commands."""
    pass


@access_commands.command()
@click.argument("kid_profile_id")
@click.option("--at", "clock", callback=parse_instant, help="Decide at this instant")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def check(ctx: click.Context, kid_profile_id: str, clock, as_json: bool) -> None:
    """Decide whether a kid may consume content."""
    with open_service(ctx, clock) as service:
        decision = service.check_access(kid_profile_id)

    if as_json:
        echo_json(decision.to_dict())
        return

    verdict = "allowed" if decision.allowed else "blocked"
    click.echo(f"{kid_profile_id}: {verdict} ({decision.reason.value})")
    if decision.limit_minutes is not None:
        click.echo(
            f"  used {decision.used_minutes:g} of {decision.limit_minutes} minutes, "
            f"{decision.remaining_minutes:g} remaining"
        )
    if decision.message:
        click.echo(f"  {decision.message}")


@access_commands.command()
@click.argument("kid_profile_id")
@click.option("--at", "clock", callback=parse_instant, help="Evaluate at this instant")
@click.pass_context
def settings(ctx: click.Context, kid_profile_id: str, clock) -> None:
    """Show a kid's time-limit settings and today's standing as JSON."""
    with open_service(ctx, clock) as service:
        echo_json(service.get_time_limit_settings(kid_profile_id))


@click.group()
def fleet_commands() -> None:
    """Parent dashboard commands."""
    pass


@fleet_commands.command()
@click.argument("user_id")
@click.option("--at", "clock", callback=parse_instant, help="Evaluate at this instant")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def status(ctx: click.Context, user_id: str, clock, as_json: bool) -> None:
    """Show the access status of every kid under a parent account."""
    with open_service(ctx, clock) as service:
        entries = service.get_fleet_status(user_id)

    if as_json:
        echo_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        click.echo(f"No kid profiles for {user_id}")
    for entry in entries:
        verdict = "allowed" if entry.decision.allowed else "blocked"
        click.echo(
            f"{entry.kid_name} ({entry.kid_profile_id}): "
            f"{verdict} ({entry.decision.reason.value})"
        )
