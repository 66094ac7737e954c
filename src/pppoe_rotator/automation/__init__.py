"""Browser automation backing the rotation engine's collaborators.

This package provides an engine abstraction (Playwright/Selenium), the usage
portal and router admin flows built on it, and ChromeDriver process handling.
Engines are imported lazily by callers so that only the selected one is loaded.
"""

from .types import AutomationError, UsageParseError
from .engine import AutomationEngine, browser_session
from .driver import ChromeDriverService
from .sites import RouterFlow, UsagePortalFlow, parse_minutes

__all__ = [
    'AutomationEngine',
    'AutomationError',
    'ChromeDriverService',
    'RouterFlow',
    'UsageParseError',
    'UsagePortalFlow',
    'browser_session',
    'parse_minutes',
]
