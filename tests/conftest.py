"""Shared fakes for the rotation engine and browser flows."""

from typing import Dict, List, Optional, Tuple, Union

import pytest

from pppoe_rotator.core.models import CandidateSet, Identity, Thresholds


class FakeProbe:
    """UsageProbe returning scripted minutes; an Exception value is raised."""

    def __init__(self, usages: Dict[str, Union[int, Exception]]):
        self.usages = usages
        self.calls: List[Tuple[str, str]] = []

    def probe_usage(self, identity_name: str, secret: str) -> int:
        self.calls.append((identity_name, secret))
        result = self.usages[identity_name]
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def probed(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeSwitcher:
    def __init__(self, result: Union[bool, Exception] = True):
        self.result = result
        self.calls: List[Tuple[str, str]] = []

    def apply_identity(self, identity_name: str, secret: str) -> bool:
        self.calls.append((identity_name, secret))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeInspector:
    def __init__(self, active: Union[str, Exception]):
        self.active = active
        self.calls = 0

    def inspect_active_identity(self) -> str:
        self.calls += 1
        if isinstance(self.active, Exception):
            raise self.active
        return self.active


class RecordingNotifier:
    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def notify(self, title: str, body: str) -> None:
        self.messages.append((title, body))

    @property
    def titles(self) -> List[str]:
        return [title for title, _ in self.messages]


class FakeEngine:
    """AutomationEngine that records actions and serves scripted page content.

    Selectors in ``missing`` fail ``wait_for``; ``texts`` and ``values`` map
    selectors to what ``text``/``value`` return. ``values`` may hold a list,
    consumed one item per read.
    """

    def __init__(self, texts=None, values=None, missing=(), click_error: Optional[Exception] = None):
        self.texts = dict(texts or {})
        self.values = dict(values or {})
        self.missing = set(missing)
        self.click_error = click_error
        self.actions: List[tuple] = []
        self.started = False
        self.stopped = False

    def start(self, headless: bool = True) -> None:
        self.started = True
        self.actions.append(("start", headless))

    def stop(self) -> None:
        self.stopped = True
        self.actions.append(("stop",))

    def goto(self, url: str, wait_until: str = "load") -> None:
        self.actions.append(("goto", url))

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        self.actions.append(("type", selector, value))

    def press(self, selector: str, key: str) -> None:
        self.actions.append(("press", selector, key))

    def click(self, selector: str) -> None:
        if self.click_error is not None:
            raise self.click_error
        self.actions.append(("click", selector))

    def wait_for(self, selector: str, timeout_ms: int = 15000) -> None:
        if selector in self.missing:
            raise TimeoutError(f"Timeout waiting for selector: {selector}")

    def text(self, selector: str) -> str:
        return self.texts[selector]

    def value(self, selector: str) -> str:
        value = self.values[selector]
        if isinstance(value, list):
            return value.pop(0)
        return value


@pytest.fixture
def pool() -> CandidateSet:
    return CandidateSet([Identity("a", "pa"), Identity("b", "pb"), Identity("c", "pc")])


@pytest.fixture
def thresholds() -> Thresholds:
    return Thresholds(switch=9000, available=9000, disable=11000)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_probe():
    return FakeProbe


@pytest.fixture
def make_switcher():
    return FakeSwitcher


@pytest.fixture
def make_inspector():
    return FakeInspector


@pytest.fixture
def make_engine():
    return FakeEngine


@pytest.fixture
def make_notifier():
    return RecordingNotifier
