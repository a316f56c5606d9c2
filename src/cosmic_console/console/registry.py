import inspect
import itertools
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from cosmic_console.console.state import Command

logger = logging.getLogger(__name__)


def accepts_argument_list(handler: Any) -> bool:
    """Return True if ``handler`` can be called with a single positional argument."""
    if not callable(handler):
        return False
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        # Builtins without signature metadata; assume they take the list.
        return True
    try:
        signature.bind(())
    except TypeError:
        return False
    return True


class CommandView:
    """Restartable view over the registry in registration order."""

    def __init__(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def __iter__(self) -> Iterator[Command]:
        return self._registry._iter_in_order()

    def __len__(self) -> int:
        return len(self._registry)


class CommandRegistry:
    """Maps aliases to the ordered list of commands registered under them.

    Several commands may share an alias. Each command is tagged with a global
    sequence number so the help listing can be rendered in registration order
    across aliases.
    """

    def __init__(self) -> None:
        self._by_alias: Dict[str, List[Tuple[int, Command]]] = {}
        self._sequence = itertools.count()

    def register(
        self,
        alias: str,
        handler: Callable[..., Any],
        description: Optional[str] = None,
    ) -> bool:
        """Add a command. Returns False (and adds nothing) for a malformed handler."""
        if not accepts_argument_list(handler):
            logger.debug("Refusing command %r: handler takes no argument list", alias)
            return False
        command = Command(alias=alias, handler=handler, description=description)
        self._by_alias.setdefault(alias, []).append((next(self._sequence), command))
        return True

    def unregister(self, alias: str) -> int:
        """Remove the first command registered under ``alias``; returns 0 or 1."""
        bucket = self._by_alias.get(alias)
        if not bucket:
            return 0
        remaining = bucket[1:]
        if remaining:
            self._by_alias[alias] = remaining
        else:
            del self._by_alias[alias]
        return 1

    def lookup(self, alias: str) -> Tuple[Command, ...]:
        return tuple(command for _, command in self._by_alias.get(alias, ()))

    def list_commands(self) -> CommandView:
        return CommandView(self)

    def aliases(self) -> List[str]:
        return list(dict.fromkeys(command.alias for command in self._iter_in_order()))

    def _iter_in_order(self) -> Iterator[Command]:
        entries = [entry for bucket in self._by_alias.values() for entry in bucket]
        entries.sort(key=lambda entry: entry[0])
        for _, command in entries:
            yield command

    def __contains__(self, alias: object) -> bool:
        return alias in self._by_alias

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._by_alias.values())
