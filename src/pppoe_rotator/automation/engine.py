from contextlib import contextmanager
from typing import Protocol, Callable, Iterator


class AutomationEngine(Protocol):
    def start(self, headless: bool = True) -> None:
        ...

    def stop(self) -> None:
        ...

    def goto(self, url: str, wait_until: str = "load") -> None:
        ...

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        ...

    def press(self, selector: str, key: str) -> None:
        ...

    def click(self, selector: str) -> None:
        ...

    def wait_for(self, selector: str, timeout_ms: int = 15000) -> None:
        ...

    def text(self, selector: str) -> str:
        ...

    def value(self, selector: str) -> str:
        ...


EngineFactory = Callable[[], AutomationEngine]


@contextmanager
def browser_session(factory: EngineFactory, headless: bool = True) -> Iterator[AutomationEngine]:
    """Start a fresh engine for one flow and always stop it afterwards."""
    engine = factory()
    engine.start(headless=headless)
    try:
        yield engine
    finally:
        engine.stop()
