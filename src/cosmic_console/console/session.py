"""
Open/closed state machine of the console overlay.

Visibility changes immediately on open()/close(). The debounce flag that the
toggle key is checked against follows one delay later, so holding or
re-pressing the toggle key inside that window does nothing.
"""

import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from cosmic_console.console.state import ConsoleState

logger = logging.getLogger(__name__)

StateListener = Callable[[bool], None]
Position = Tuple[float, float]


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """One-shot timers on the console's event queue (an asyncio loop fits)."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class ConsoleSession:
    """Tracks whether the console is shown and debounces the toggle key."""

    def __init__(
        self,
        scheduler: Scheduler,
        debounce_delay: float = 1.0,
        reposition_on_close: bool = True,
        start_open: bool = False,
        position: Position = (0.0, 0.0),
    ) -> None:
        self._scheduler = scheduler
        self.debounce_delay = debounce_delay
        self.reposition_on_close = reposition_on_close

        self.alpha = 1.0 if start_open else 0.0
        self.interactable = start_open
        self.blocks_input = start_open
        self.debounce_open = start_open

        self.position = position
        self.origin_position = position

        self._listeners: List[StateListener] = []
        self._pending_flip: Optional[TimerHandle] = None

    @property
    def state(self) -> ConsoleState:
        return ConsoleState.OPEN if self.alpha == 1 else ConsoleState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is ConsoleState.OPEN

    @property
    def transitioning(self) -> bool:
        return self.debounce_open != self.is_open

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def open(self) -> bool:
        if self.alpha == 1:
            return False
        self._set_visible(True)
        self._notify(True)
        self._schedule_flip(True)
        return True

    def close(self) -> bool:
        if self.alpha == 0:
            return False
        self._set_visible(False)
        self._notify(False)
        self._schedule_flip(False)
        if self.reposition_on_close:
            self.position = self.origin_position
        return True

    def handle_toggle(self, held: bool) -> None:
        """Poll the toggle key once; decisions use the debounce flag, not visibility."""
        if not held:
            return
        if not self.debounce_open:
            self.open()
        else:
            self.close()

    def _set_visible(self, visible: bool) -> None:
        self.alpha = 1.0 if visible else 0.0
        self.interactable = visible
        self.blocks_input = visible

    def _notify(self, is_open: bool) -> None:
        logger.debug("Console %s", "opened" if is_open else "closed")
        for listener in list(self._listeners):
            listener(is_open)

    def _schedule_flip(self, target: bool) -> None:
        # A transition still waiting on its flip is superseded by the new one.
        if self._pending_flip is not None:
            self._pending_flip.cancel()
        self._pending_flip = self._scheduler.call_later(
            self.debounce_delay, self._flip_debounce, target
        )

    def _flip_debounce(self, target: bool) -> None:
        self._pending_flip = None
        self.debounce_open = target
