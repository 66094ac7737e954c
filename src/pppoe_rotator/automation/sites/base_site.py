import time
from contextlib import contextmanager
from typing import Callable, Iterator

from ..engine import AutomationEngine, EngineFactory, browser_session
from ..types import AutomationError


class SiteFlow:
    """Shared plumbing for flows that each run in their own browser session."""

    def __init__(
        self,
        engine_factory: EngineFactory,
        headless: bool = True,
        settle_wait: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine_factory = engine_factory
        self.headless = headless
        self.settle_wait = settle_wait
        self._sleep = sleep

    @contextmanager
    def session(self) -> Iterator[AutomationEngine]:
        with browser_session(self.engine_factory, headless=self.headless) as engine:
            yield engine

    def settle(self, seconds: float = None) -> None:
        """Give the page time to finish loading or applying changes."""
        seconds = self.settle_wait if seconds is None else seconds
        if seconds > 0:
            self._sleep(seconds)

    @staticmethod
    def require(engine: AutomationEngine, selector: str, what: str, timeout_ms: int = 15000) -> None:
        try:
            engine.wait_for(selector, timeout_ms=timeout_ms)
        except Exception as e:
            raise AutomationError(f"{what} not found") from e
