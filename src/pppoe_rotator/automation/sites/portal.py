import logging
import re

from ..engine import AutomationEngine
from ..types import UsageParseError
from .base_site import SiteFlow

logger = logging.getLogger(__name__)

USERNAME_FIELD = "input[name='username']"
PASSWORD_FIELD = "input[name='password']"
SUBMIT_BUTTON = "button[type='submit'], input[type='submit']"
TOTAL_USE_CELL = "xpath=//td[contains(text(), 'Total Use:')]/following-sibling::td[1]"

_DIGITS = re.compile(r"^\d+$")


def parse_minutes(text: str) -> int:
    """Parse the usage cell, e.g. ``"3,577 Minute"`` -> 3577."""
    parts = (text or "").split()
    if not parts:
        raise UsageParseError(f"Could not parse Total Use value: {text!r}")
    amount = parts[0].replace(",", "")
    if not _DIGITS.match(amount):
        raise UsageParseError(f"Failed to parse amount: {amount!r}")
    return int(amount)


class UsagePortalFlow(SiteFlow):
    """Reads an identity's cumulative usage from the ISP usage portal."""

    def __init__(self, login_url: str, engine_factory, **kwargs):
        super().__init__(engine_factory, **kwargs)
        self.login_url = login_url

    def _submit(self, engine: AutomationEngine) -> None:
        try:
            engine.wait_for(SUBMIT_BUTTON, timeout_ms=3000)
            engine.click(SUBMIT_BUTTON)
        except Exception:
            # No usable sign-in button; submit the form from the password field.
            engine.press(PASSWORD_FIELD, "Enter")

    def probe_usage(self, identity_name: str, secret: str) -> int:
        logger.debug(f"Probing usage for '{identity_name}' at {self.login_url}")
        with self.session() as engine:
            engine.goto(self.login_url)
            self.require(engine, USERNAME_FIELD, "Username field")
            self.require(engine, PASSWORD_FIELD, "Password field")
            engine.type(USERNAME_FIELD, identity_name)
            engine.type(PASSWORD_FIELD, secret)
            self._submit(engine)

            self.settle()
            self.require(engine, TOTAL_USE_CELL, "Total Use cell")
            minutes = parse_minutes(engine.text(TOTAL_USE_CELL))

        logger.debug(f"Usage for '{identity_name}': {minutes} minutes")
        return minutes
