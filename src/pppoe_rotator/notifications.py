"""Notifiers for reporting cycle outcomes to the user."""
import logging
import shutil
import subprocess
import sys
from typing import Iterable, List, Optional

from rich.console import Console
from rich.panel import Panel

logger = logging.getLogger(__name__)

APP_NAME = "PPPoE Rotator"
NOTIFY_TIMEOUT_MS = 5000


class DesktopNotifier:
    """Shows a desktop notification through the platform's command line tool.

    Linux uses ``notify-send`` and macOS uses ``osascript``. Windows ships no
    equivalent command, so there desktop notifications are skipped and only
    the console and log output remain. The command is started and not waited
    for. Delivery failures are logged, never raised.
    """

    def __init__(
        self,
        app_name: str = APP_NAME,
        timeout_ms: int = NOTIFY_TIMEOUT_MS,
        executable: Optional[str] = None,
        platform: Optional[str] = None,
    ):
        self.app_name = app_name
        self.timeout_ms = timeout_ms
        self.platform = platform or sys.platform
        self.executable = executable or _default_executable(self.platform)

    @property
    def supported(self) -> bool:
        return self.executable is not None

    def command(self, title: str, body: str) -> List[str]:
        if self.platform == "darwin":
            script = f"display notification {_applescript(body)} with title {_applescript(title)}"
            return [self.executable, "-e", script]
        return [self.executable, "-a", self.app_name, "-t", str(self.timeout_ms), title, body]

    def notify(self, title: str, body: str) -> None:
        if not self.supported:
            logger.debug(f"No desktop notification command on {self.platform}; {title}: {body}")
            return
        try:
            subprocess.Popen(
                self.command(title, body),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning(f"Desktop notification failed ({e}); {title}: {body}")


def _default_executable(platform: str) -> Optional[str]:
    if platform.startswith("win"):
        return None
    name = "osascript" if platform == "darwin" else "notify-send"
    return shutil.which(name) or name


def _applescript(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class ConsoleNotifier:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, title: str, body: str) -> None:
        self.console.print(Panel(body, title=title, expand=False))


class MultiNotifier:
    """Sends every notification to each wrapped notifier, in order."""

    def __init__(self, notifiers: Iterable):
        self.notifiers = list(notifiers)

    def notify(self, title: str, body: str) -> None:
        for notifier in self.notifiers:
            try:
                notifier.notify(title, body)
            except Exception as e:
                logger.warning(f"{type(notifier).__name__} failed to deliver '{title}': {e}")
