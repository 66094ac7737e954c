"""
PPPoE Rotator CLI - Command Line Interface for PPPoE identity rotation.
"""
import sys
import json
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import RotatorCLI, print_identities, print_outcome, print_usage_table
from ..config import ENGINES

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, console=Console(stderr=True))]
)
logger = logging.getLogger("pppoe_rotator")

# Create console for rich output
console = Console()

spawn_driver_option = click.option(
    "--spawn-driver",
    is_flag=True,
    default=False,
    help="Start a local chromedriver for the selenium engine and stop it afterwards",
)


@click.group(invoke_without_command=True)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a .env file with ROUTER_IP, ROUTER_PASSWORD and PPPOE_CREDENTIALS",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output",
    show_default=True
)
@click.option(
    "--engine",
    type=click.Choice(ENGINES),
    default=None,
    help="Browser automation engine (overrides BROWSER_ENGINE)",
)
@click.option(
    "--headless/--no-headless",
    default=None,
    help="Run the browser without a visible window (overrides BROWSER_HEADLESS)",
)
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str], debug: bool, engine: Optional[str], headless: Optional[bool]) -> None:
    """PPPoE Rotator - switch PPPoE identities before their usage quota runs out."""
    ctx.obj = RotatorCLI(env_file=env_file, debug=debug, engine=engine, headless=headless)

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option(
    "--notify/--no-notify",
    default=True,
    help="Also send a desktop notification with the outcome",
    show_default=True
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the cycle outcome as JSON instead of a summary",
)
@spawn_driver_option
@click.pass_obj
def run(rotator: RotatorCLI, notify: bool, as_json: bool, spawn_driver: bool) -> None:
    """Run one rotation cycle: check usage and switch or disable if needed."""
    outcome = rotator.run_cycle(desktop_notify=notify, spawn_driver=spawn_driver, show_notifications=not as_json)
    if as_json:
        report = outcome.to_dict()
        report["thresholds"] = rotator.settings.thresholds.to_dict()
        click.echo(json.dumps(report, default=str))
    else:
        print_outcome(outcome)


@cli.command()
@spawn_driver_option
@click.pass_obj
def check(rotator: RotatorCLI, spawn_driver: bool) -> None:
    """Show the usage of every configured identity."""
    settings = rotator.settings
    rows = rotator.check_usage(spawn_driver=spawn_driver)
    print_usage_table(rows, settings.thresholds)


@cli.command()
@spawn_driver_option
@click.pass_obj
def status(rotator: RotatorCLI, spawn_driver: bool) -> None:
    """Show the identity the router is using and its usage."""
    settings = rotator.settings
    row = rotator.active_status(spawn_driver=spawn_driver)
    print_usage_table([row], settings.thresholds, active=row.identity.name)


@cli.command()
@click.pass_obj
def identities(rotator: RotatorCLI) -> None:
    """Validate and list the configured identity pool."""
    settings = rotator.settings
    print_identities(settings.candidates)
    console.print(f"[green]✓[/] {len(settings.candidates)} identities configured")


def main() -> None:
    """Entry point for the PPPoE Rotator CLI."""
    try:
        cli()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if "--debug" in sys.argv:
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
