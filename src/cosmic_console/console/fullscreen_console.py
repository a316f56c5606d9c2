"""
Full-screen terminal embedding of the developer console using prompt_toolkit.

This provides:
- a scrollback window fed by the console's output history
- a single-line input that submits to the console's dispatcher
- a toggle key (F12 by default) that shows and hides the overlay
- an asyncio tick loop driving the toggle key and queued log events
"""

import asyncio
import itertools
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from prompt_toolkit import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI, FormattedText
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.layout import (
    ConditionalContainer,
    HSplit,
    Layout,
    VSplit,
    Window,
    WindowAlign,
)
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame
from rich.markup import escape

from cosmic_console.console.console import DeveloperConsole
from cosmic_console.console.key_bindings import ToggleKeyState, get_key_bindings
from cosmic_console.console.log_bridge import LogSource
from cosmic_console.console.rendering import render_entry
from cosmic_console.console.session import Scheduler
from cosmic_console.console.state import InputAction, OutputEntry
from cosmic_console.runtime_config import ConsoleConfig

logger = logging.getLogger(__name__)


class ScrollbackSink:
    """OutputSink that keeps rendered ANSI lines for a prompt_toolkit window."""

    def __init__(self, width: int = 120) -> None:
        self.width = width
        self._lines: Dict[int, str] = {}
        self._handles = itertools.count()
        self.on_change: Optional[Callable[[], None]] = None
        self.follow_latest = True

    def create_entry(self, entry: OutputEntry) -> int:
        handle = next(self._handles)
        self._lines[handle] = render_entry(entry, self.width)
        return handle

    def destroy_entry(self, handle: Any) -> None:
        self._lines.pop(handle, None)
        self._changed()

    def notify_scroll_to_latest(self) -> None:
        self.follow_latest = True
        self._changed()

    @property
    def text(self) -> str:
        return "\n".join(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def formatted_text(self) -> ANSI:
        return ANSI(self.text)

    def cursor_position(self) -> Point:
        """Keep the window scrolled to the newest line."""
        if not self.follow_latest:
            return Point(x=0, y=0)
        return Point(x=0, y=max(len(self._lines) - 1, 0))

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()


class FullscreenConsole:
    """Full-screen console overlay with prompt_toolkit Application."""

    def __init__(
        self,
        config: ConsoleConfig,
        scheduler: Scheduler,
        log_source: Optional[LogSource] = None,
        post: Optional[Callable[[Callable[[], None]], Any]] = None,
        history_path: Optional[Path] = None,
    ) -> None:
        self.config = config
        self.app: Optional[Application[Any]] = None
        self.sink = ScrollbackSink()
        self.sink.on_change = self._invalidate
        self.toggle_state = ToggleKeyState()

        self.console = DeveloperConsole(
            self.sink,
            scheduler,
            config=config,
            log_source=log_source,
            request_quit=self._request_quit,
            post=post,
        )
        self.console.session.subscribe(self._on_state_changed)

        history: History = (
            FileHistory(str(history_path)) if history_path else InMemoryHistory()
        )
        self.input_buffer = Buffer(
            multiline=False,
            history=history,
            accept_handler=self._accept_input,
            read_only=Condition(lambda: not self.console.session.interactable),
        )
        self.input_window = Window(BufferControl(self.input_buffer), height=1)

    def _invalidate(self) -> None:
        if self.app:
            self.app.invalidate()

    def _request_quit(self) -> bool:
        if self.app is None or not self.app.is_running:
            return False
        self.app.exit()
        return True

    def _focus_input(self) -> None:
        if self.app:
            self.app.layout.focus(self.input_window)

    def _on_state_changed(self, is_open: bool) -> None:
        if is_open:
            self._focus_input()
        self._invalidate()

    def _accept_input(self, buffer: Buffer) -> bool:
        """Submit the input line; returning False clears the buffer."""
        text = buffer.text
        try:
            action = self.console.submit(text)
        except Exception as e:
            # Handler failures are ours to report; the console core lets them through.
            logger.exception("Command %r failed", text)
            self.console.send(
                f"{escape(type(e).__name__)}: {escape(str(e))}",
                self.config.colors.error,
            )
            action = InputAction.CLEAR_AND_REFOCUS

        if action is InputAction.CLEAR_AND_REFOCUS:
            self._focus_input()
            return False
        return True

    def _status_text(self) -> FormattedText:
        key = self.config.toggle_key.upper()
        if self.console.session.is_open:
            return FormattedText([("fg:gray", f"{key} closes the console · Ctrl+C exits")])
        return FormattedText([("fg:gray", f"Press {key} to open the console · Ctrl+C exits")])

    def _create_layout(self) -> Layout:
        output_window = Window(
            FormattedTextControl(
                self.sink.formatted_text,
                get_cursor_position=self.sink.cursor_position,
                focusable=False,
            ),
            wrap_lines=True,
        )
        prompt = Window(FormattedTextControl([("bold fg:green", "› ")]), width=2)
        body = Frame(
            HSplit([output_window, VSplit([prompt, self.input_window])]),
            title="CosmicConsole",
        )
        overlay = ConditionalContainer(
            body, filter=Condition(lambda: self.console.session.is_open)
        )
        footer = Window(
            FormattedTextControl(self._status_text),
            height=1,
            align=WindowAlign.LEFT,
            style="reverse",
        )
        return Layout(HSplit([overlay, Window(), footer]), focused_element=self.input_window)

    async def _tick_loop(self) -> None:
        while True:
            self.console.tick(self.toggle_state.consume())
            await asyncio.sleep(self.config.tick_interval)

    async def run(self) -> None:
        """Run the full-screen application until it exits."""
        self.app = Application(
            layout=self._create_layout(),
            key_bindings=get_key_bindings(self.config.toggle_key, self.toggle_state),
            full_screen=True,
            style=Style.from_dict({"": "#ffffff", "reverse": "reverse"}),
            mouse_support=False,
        )
        tick_task = asyncio.create_task(self._tick_loop())
        try:
            with self.console:
                await self.app.run_async()
        finally:
            tick_task.cancel()
            try:
                await tick_task
            except asyncio.CancelledError:
                pass
