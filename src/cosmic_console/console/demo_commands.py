"""
Example commands registered by the cosmic-console CLI.

They double as a smoke test of the extension API: ``echo`` prints through the
console, ``log`` goes out through the standard logging module and comes back
in through the log bridge.
"""

import logging
import threading
from typing import Sequence

from rich.markup import escape

from cosmic_console.console.console import DeveloperConsole

host_logger = logging.getLogger("cosmic_demo")
host_logger.setLevel(logging.INFO)

LOG_LEVELS = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def register_demo_commands(console: DeveloperConsole) -> None:
    colors = console.config.colors

    def cmd_echo(args: Sequence[str]) -> None:
        console.send(escape(" ".join(args)))

    def cmd_log(args: Sequence[str]) -> None:
        if not args or args[0] not in LOG_LEVELS:
            console.send("usage: log info|warning|error <message>", colors.warning)
            return
        host_logger.log(LOG_LEVELS[args[0]], " ".join(args[1:]))

    def cmd_log_thread(args: Sequence[str]) -> None:
        message = " ".join(args) or "hello from a worker thread"
        worker = threading.Thread(target=host_logger.warning, args=(message,), daemon=True)
        worker.start()

    console.add_command("echo", cmd_echo, "Prints its arguments.")
    console.add_command("log", cmd_log, "Emits a host log record: log <level> <message>")
    console.add_command(
        "logthread", cmd_log_thread, "Emits a host warning from a worker thread."
    )
