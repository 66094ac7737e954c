"""
PPPoE Rotator CLI - wiring between configuration, browser flows and the engine.
"""
from contextlib import contextmanager
from typing import Optional, List, Iterator, NamedTuple
import logging

import click
from rich.console import Console
from rich.table import Table

from ..config import Settings, ConfigurationError
from ..core.decisions import DecisionKind, RotationOutcome
from ..core.engine import RotationEngine
from ..core.models import CandidateSet, Identity, Thresholds
from ..automation.driver import ChromeDriverService
from ..automation.engine import EngineFactory
from ..automation.sites import RouterFlow, UsagePortalFlow
from ..notifications import ConsoleNotifier, DesktopNotifier, MultiNotifier

logger = logging.getLogger(__name__)

# Create console for rich output
console = Console()


class UsageRow(NamedTuple):
    identity: Identity
    minutes: Optional[int]
    error: Optional[str]


class RotatorCLI:
    """Builds collaborators from settings and runs the CLI operations."""

    def __init__(
        self,
        env_file: Optional[str] = None,
        debug: bool = False,
        engine: Optional[str] = None,
        headless: Optional[bool] = None,
    ):
        self.env_file = env_file
        self.debug = debug
        self.engine = engine
        self.headless = headless
        self._settings: Optional[Settings] = None

        if debug:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug("Debug mode enabled")

    @property
    def settings(self) -> Settings:
        """Load settings once; configuration problems become CLI errors."""
        if self._settings is None:
            try:
                settings = Settings.from_env(self.env_file)
            except ConfigurationError as e:
                raise click.ClickException(f"Configuration error: {e}")
            if self.engine:
                settings.engine = self.engine
            if self.headless is not None:
                settings.headless = self.headless
            self._settings = settings
        return self._settings

    def engine_factory(self, driver_url: Optional[str] = None) -> EngineFactory:
        if self.settings.engine == "selenium":
            from ..automation.selenium_engine import SeleniumEngine, SELENIUM_AVAILABLE
            if not SELENIUM_AVAILABLE:
                raise click.ClickException("Selenium not installed. Install extra: pip install .[automation-selenium]")
            remote_url = driver_url or self.settings.chromedriver_url
            return lambda: SeleniumEngine(remote_url=remote_url)

        from ..automation.playwright_engine import PlaywrightEngine
        return PlaywrightEngine

    def portal(self, driver_url: Optional[str] = None) -> UsagePortalFlow:
        settings = self.settings
        return UsagePortalFlow(
            settings.usage_portal_url,
            self.engine_factory(driver_url),
            headless=settings.headless,
            settle_wait=settings.settle_wait,
        )

    def router(self, driver_url: Optional[str] = None) -> RouterFlow:
        settings = self.settings
        return RouterFlow(
            settings.router_ip,
            settings.router_password,
            self.engine_factory(driver_url),
            apply_wait=settings.apply_wait,
            headless=settings.headless,
            settle_wait=settings.settle_wait,
        )

    def notifier(self, desktop: bool = True, show: bool = True):
        notifiers = [ConsoleNotifier(console)] if show else []
        if desktop:
            notifiers.append(DesktopNotifier())
        return MultiNotifier(notifiers)

    @contextmanager
    def driver(self, spawn: bool = False) -> Iterator[Optional[str]]:
        """Yield the WebDriver URL to use, running a local ChromeDriver if asked."""
        if not spawn:
            yield None
            return
        if self.settings.engine != "selenium":
            raise click.UsageError("--spawn-driver requires --engine selenium")
        try:
            service = ChromeDriverService()
            service.start()
        except RuntimeError as e:
            raise click.ClickException(str(e))
        try:
            yield service.url
        finally:
            service.stop()

    def run_cycle(
        self, desktop_notify: bool = True, spawn_driver: bool = False, show_notifications: bool = True
    ) -> RotationOutcome:
        """Run one rotation decision against the live router."""
        settings = self.settings
        with self.driver(spawn_driver) as driver_url:
            router = self.router(driver_url)
            engine = RotationEngine(
                probe=self.portal(driver_url),
                switcher=router,
                notifier=self.notifier(desktop_notify, show=show_notifications),
                inspector=router,
                disable_secret=settings.disable_secret,
            )
            try:
                return engine.run_cycle(settings.candidates, settings.thresholds)
            except Exception as e:
                if self.debug:
                    logger.exception("Rotation cycle failed")
                raise click.ClickException(f"Rotation cycle failed: {e}")

    def check_usage(self, spawn_driver: bool = False) -> List[UsageRow]:
        """Probe every identity in the pool; failures are reported per row."""
        rows: List[UsageRow] = []
        with self.driver(spawn_driver) as driver_url:
            portal = self.portal(driver_url)
            for identity in self.settings.candidates:
                try:
                    rows.append(UsageRow(identity, portal.probe_usage(identity.name, identity.secret), None))
                except Exception as e:
                    if self.debug:
                        logger.exception(f"Error checking '{identity.name}'")
                    rows.append(UsageRow(identity, None, str(e)))
        return rows

    def active_status(self, spawn_driver: bool = False) -> UsageRow:
        """Return the identity the router reports as active, with its usage."""
        settings = self.settings
        with self.driver(spawn_driver) as driver_url:
            try:
                name = self.router(driver_url).inspect_active_identity()
                identity = settings.candidates.get(name)
                if identity is None:
                    return UsageRow(Identity(name=name, secret=""), None, "not in the configured pool")
                minutes = self.portal(driver_url).probe_usage(identity.name, identity.secret)
            except click.ClickException:
                raise
            except Exception as e:
                if self.debug:
                    logger.exception("Error reading router status")
                raise click.ClickException(f"Failed to read status: {e}")
        return UsageRow(identity, minutes, None)


def _usage_style(minutes: Optional[int], thresholds: Thresholds) -> str:
    if minutes is None:
        return "red"
    if minutes > thresholds.disable:
        return "bold red"
    if minutes > thresholds.switch:
        return "yellow"
    return "green"


def print_usage_table(rows: List[UsageRow], thresholds: Thresholds, active: Optional[str] = None) -> None:
    """Print a table of identities and their usage against the thresholds."""
    if not rows:
        console.print("[yellow]No identities configured.[/]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Identity")
    table.add_column("Usage (min)", justify="right")
    table.add_column("State")

    for row in rows:
        name = f"{row.identity.name} (active)" if row.identity.name == active else row.identity.name
        if row.error:
            table.add_row(name, "-", f"[red]error: {row.error}[/]")
            continue
        style = _usage_style(row.minutes, thresholds)
        if row.minutes > thresholds.disable:
            state = "over disable limit"
        elif row.minutes > thresholds.available:
            state = "exhausted"
        else:
            state = "available"
        table.add_row(name, f"[{style}]{row.minutes}[/]", state)

    console.print(table)
    console.print(
        f"[dim]switch > {thresholds.switch}, available <= {thresholds.available}, "
        f"disable > {thresholds.disable}[/]"
    )


def print_identities(candidates: CandidateSet) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Identity")
    table.add_column("Secret", style="dim")
    for position, identity in enumerate(candidates, start=1):
        table.add_row(str(position), identity.name, identity.masked())
    console.print(table)


def print_outcome(outcome: RotationOutcome) -> None:
    decision = outcome.decision
    if outcome.active is None:
        console.print("[yellow]Active PPPoE ID is not in the configured pool. No action taken.[/]")
        return

    console.print(f"[bold]Active:[/bold] {outcome.active.name} ({outcome.active_usage} minutes)")
    for reading in outcome.readings:
        console.print(f"  checked {reading.identity_name}: {reading.minutes} minutes")
    for name, error in outcome.unavailable.items():
        console.print(f"  [red]checked {name}: {error}[/]")

    if decision.kind == DecisionKind.NO_ACTION:
        console.print("[green]✓[/] Usage within limit. No action taken.")
    elif decision.kind == DecisionKind.NO_IDENTITY_AVAILABLE:
        console.print("[yellow]⚠[/] No identity available. Connection left as-is.")
    else:
        verb = "Switch to" if decision.kind == DecisionKind.SWITCH else "Disable"
        status = outcome.applied.status.value if outcome.applied else "not attempted"
        mark = "[green]✓[/]" if outcome.applied and outcome.applied.ok else "[red]✗[/]"
        console.print(f"{mark} {verb} '{decision.target.name}': {status}")
        if outcome.applied and outcome.applied.error:
            console.print(f"  [red]{outcome.applied.error}[/]")
