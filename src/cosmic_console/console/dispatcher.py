import logging
from typing import List, Tuple

from rich.markup import escape

from cosmic_console.console.output import OutputHistory
from cosmic_console.console.registry import CommandRegistry

logger = logging.getLogger(__name__)


def split_command_line(raw_line: str) -> Tuple[str, List[str]]:
    """Split on single spaces: first token is the alias, the rest are arguments.

    There is no quoting, and consecutive spaces produce empty arguments.
    """
    tokens = raw_line.split(" ")
    return tokens[0], tokens[1:]


class Dispatcher:
    """Routes raw input lines to the commands registered under their alias."""

    def __init__(
        self, registry: CommandRegistry, output: OutputHistory, error_color: str
    ) -> None:
        self._registry = registry
        self._output = output
        self._error_color = error_color

    def dispatch(self, raw_line: str) -> int:
        """Invoke every command matching the line's alias; returns how many ran.

        Exceptions raised by handlers are not caught here.
        """
        alias, arguments = split_command_line(raw_line)
        matches = self._registry.lookup(alias)
        logger.debug("Dispatching %r with %r to %d command(s)", alias, arguments, len(matches))
        if not matches:
            self._output.append(
                f'There is no Command with the alias "{escape(alias)}".',
                self._error_color,
            )
            return 0
        for command in matches:
            command.handler(list(arguments))
        return len(matches)
