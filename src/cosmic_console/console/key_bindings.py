from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys


class ToggleKeyState:
    """Latches toggle-key presses until the next tick polls them.

    Terminals deliver key presses, not held keys, so a press counts as
    "held" for exactly one tick.
    """

    def __init__(self) -> None:
        self._pressed = False

    def press(self) -> None:
        self._pressed = True

    def consume(self) -> bool:
        pressed, self._pressed = self._pressed, False
        return pressed


def get_key_bindings(toggle_key: str, toggle_state: ToggleKeyState) -> KeyBindings:
    """Return the global KeyBindings (toggle key and Ctrl+C).

    Args:
        toggle_key: prompt_toolkit key name, e.g. "f12" or "c-t"
        toggle_state: latch polled by the tick loop
    """
    kb = KeyBindings()

    @kb.add(toggle_key, eager=True)
    def _(event: KeyPressEvent) -> None:
        """Request an open/close on the next tick."""
        toggle_state.press()

    @kb.add(Keys.ControlC)
    def _(event: KeyPressEvent) -> None:
        """Leave the application."""
        event.app.exit()

    return kb
