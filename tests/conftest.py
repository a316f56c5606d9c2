from typing import Any, Callable, List, Tuple

import pytest

from cosmic_console.console.console import DeveloperConsole
from cosmic_console.console.state import OutputEntry
from cosmic_console.runtime_config import ConsoleConfig


class RecordingSink:
    """OutputSink that records every call."""

    def __init__(self) -> None:
        self.created: List[Tuple[int, OutputEntry]] = []
        self.destroyed: List[int] = []
        self.scroll_requests = 0
        self._next_handle = 0

    def create_entry(self, entry: OutputEntry) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.created.append((handle, entry))
        return handle

    def destroy_entry(self, handle: Any) -> None:
        self.destroyed.append(handle)

    def notify_scroll_to_latest(self) -> None:
        self.scroll_requests += 1

    @property
    def texts(self) -> List[str]:
        return [entry.text for _, entry in self.created]

    @property
    def live_texts(self) -> List[str]:
        return [entry.text for handle, entry in self.created if handle not in self.destroyed]


class FakeTimer:
    def __init__(self, due: float, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        self.due = due
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler with a clock that only moves when the test advances it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: List[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (t for t in self.timers if not t.cancelled and t.due <= self.now),
            key=lambda t: t.due,
        )
        for timer in due:
            self.timers.remove(timer)
            timer.callback(*timer.args)

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]


class FakeLogSource:
    """LogSource that lets tests emit host log events directly."""

    def __init__(self) -> None:
        self.callbacks: List[Callable[[str, str, Any], None]] = []

    def subscribe(self, callback: Callable[[str, str, Any], None]) -> None:
        self.callbacks.append(callback)

    def unsubscribe(self, callback: Callable[[str, str, Any], None]) -> None:
        self.callbacks.remove(callback)

    def emit(self, message: str, trace: str, severity: Any) -> None:
        for callback in list(self.callbacks):
            callback(message, trace, severity)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def log_source() -> FakeLogSource:
    return FakeLogSource()


@pytest.fixture
def quiet_config() -> ConsoleConfig:
    """Config without the welcome banner so tests start from empty output."""
    return ConsoleConfig(print_welcome=False)


@pytest.fixture
def console(
    sink: RecordingSink,
    scheduler: ManualScheduler,
    log_source: FakeLogSource,
    quiet_config: ConsoleConfig,
) -> DeveloperConsole:
    return DeveloperConsole(sink, scheduler, config=quiet_config, log_source=log_source)
