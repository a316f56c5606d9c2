"""
Value types shared by the console core: commands, output entries and state enums.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

CommandHandler = Callable[[Sequence[str]], None]


@dataclass(frozen=True)
class Command:
    """A registered command: alias, optional description and handler."""

    alias: str
    handler: CommandHandler
    description: Optional[str] = None

    @property
    def listed(self) -> bool:
        """Commands without a description are hidden from the help list."""
        return bool(self.description)


@dataclass(frozen=True)
class OutputEntry:
    """One line of console output. ``text`` is rich markup without CR/LF."""

    text: str
    color: str


class ConsoleState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class HostLogType(str, Enum):
    """Raw classification of a host log event."""

    LOG = "log"
    WARNING = "warning"
    ERROR = "error"
    ASSERT = "assert"
    EXCEPTION = "exception"


class LogSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_host(cls, log_type: Any) -> Optional["LogSeverity"]:
        """Collapse a host log type; None when the type is not recognised.

        Only HostLogType members are recognised, plain strings pass through.
        """
        if not isinstance(log_type, HostLogType):
            return None
        match log_type:
            case HostLogType.LOG:
                return cls.INFO
            case HostLogType.WARNING:
                return cls.WARNING
            case HostLogType.ERROR | HostLogType.ASSERT | HostLogType.EXCEPTION:
                return cls.ERROR
            case _:
                return None


class InputAction(str, Enum):
    """What the input widget should do after a submit."""

    NONE = "none"
    CLEAR_AND_REFOCUS = "clear_and_refocus"
