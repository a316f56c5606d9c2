import logging
import sys
from typing import Any, Callable, Optional

from cosmic_console.console.builtin_commands import register_builtin_commands, send_welcome
from cosmic_console.console.dispatcher import Dispatcher
from cosmic_console.console.log_bridge import LogBridge, LogSource
from cosmic_console.console.output import OutputHistory, OutputSink
from cosmic_console.console.registry import CommandRegistry
from cosmic_console.console.session import ConsoleSession, Scheduler
from cosmic_console.console.state import InputAction
from cosmic_console.runtime_config import ConsoleConfig

logger = logging.getLogger(__name__)

QuitRequest = Callable[[], Any]


class ConsoleConfigurationError(Exception):
    """Raised when a console is built without one of its required collaborators."""


def _exit_process() -> None:
    sys.exit(0)


class DeveloperConsole:
    """The console service: registry, dispatch, output history, session and log bridge.

    One instance is built by the embedding application and handed to whatever
    needs it; there is no global accessor.
    """

    def __init__(
        self,
        sink: OutputSink,
        scheduler: Scheduler,
        config: Optional[ConsoleConfig] = None,
        log_source: Optional[LogSource] = None,
        request_quit: Optional[QuitRequest] = None,
        post: Optional[Callable[[Callable[[], None]], Any]] = None,
    ) -> None:
        if sink is None:
            raise ConsoleConfigurationError("An output sink is required")
        if scheduler is None:
            raise ConsoleConfigurationError("A scheduler is required")

        self.config = config or ConsoleConfig()
        self._request_quit = request_quit or _exit_process

        self.registry = CommandRegistry()
        self.history = OutputHistory(sink)
        self.dispatcher = Dispatcher(self.registry, self.history, self.config.colors.error)
        self.session = ConsoleSession(
            scheduler,
            debounce_delay=self.config.debounce_delay,
            reposition_on_close=self.config.reposition_on_close,
            start_open=self.config.start_open,
        )
        self.log_bridge: Optional[LogBridge] = None
        if log_source is not None:
            self.log_bridge = LogBridge(
                log_source,
                self.history,
                self.config.colors,
                enabled=self.config.print_host_log,
                post=post,
            )

        register_builtin_commands(self)
        if self.config.print_welcome:
            send_welcome(self)

    def add_command(
        self,
        alias: str,
        handler: Callable[..., Any],
        description: Optional[str] = None,
    ) -> bool:
        return self.registry.register(alias, handler, description)

    def remove_command(self, alias: str) -> None:
        self.registry.unregister(alias)

    def send(self, text: str, color: Optional[str] = None) -> None:
        """Print a line of rich markup to the console."""
        self.history.append(text, color or self.config.colors.normal)

    def request_quit(self) -> bool:
        """Ask the host to terminate; False when the host did not accept."""
        logger.info("Quit requested")
        return bool(self._request_quit())

    def submit(self, raw_text: str) -> InputAction:
        """Handle a line submitted from the input widget."""
        if not raw_text:
            return InputAction.NONE
        self.dispatcher.dispatch(raw_text)
        return InputAction.CLEAR_AND_REFOCUS

    def tick(self, toggle_held: bool) -> None:
        """Per-frame update: drain queued log events, then poll the toggle key."""
        if self.log_bridge is not None:
            self.log_bridge.pump()
        self.session.handle_toggle(toggle_held)

    def __enter__(self) -> "DeveloperConsole":
        if self.log_bridge is not None:
            self.log_bridge.activate()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.log_bridge is not None:
            self.log_bridge.deactivate()
