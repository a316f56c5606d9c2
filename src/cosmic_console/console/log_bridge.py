"""
Mirror the host's log stream into the console output.

The bridge subscribes to a LogSource while active. Events raised on the thread
that owns the console are written straight away; events from other threads are
queued and written when the owner thread calls pump() (or handed to ``post``,
e.g. ``loop.call_soon_threadsafe``), so the output history only ever has one
writer.
"""

import logging
import queue
import threading
import traceback
from typing import Any, Callable, Optional, Protocol, Tuple

from rich.markup import escape

from cosmic_console.console.output import OutputHistory
from cosmic_console.console.state import HostLogType, LogSeverity
from cosmic_console.runtime_config import ConsoleColors

logger = logging.getLogger(__name__)

LogCallback = Callable[[str, str, Any], None]
LogEvent = Tuple[str, str, Any]

_PREFIXES = {
    LogSeverity.INFO: "[LOG]",
    LogSeverity.WARNING: "[WARN]",
    LogSeverity.ERROR: "[ERROR]",
}


class LogSource(Protocol):
    def subscribe(self, callback: LogCallback) -> None:
        ...

    def unsubscribe(self, callback: LogCallback) -> None:
        ...


def format_log_event(message: str, severity: Any, colors: ConsoleColors) -> Tuple[str, str]:
    """Return the console text and colour for a host log event."""
    text = escape(message)
    match LogSeverity.from_host(severity):
        case LogSeverity.INFO:
            return f"{_PREFIXES[LogSeverity.INFO]} {text}", colors.normal
        case LogSeverity.WARNING:
            return f"{_PREFIXES[LogSeverity.WARNING]} {text}", colors.warning
        case LogSeverity.ERROR:
            return f"{_PREFIXES[LogSeverity.ERROR]} {text}", colors.error
        case _:
            return text, colors.normal


class LogBridge:
    """Scoped subscription of the console output to a host log source."""

    def __init__(
        self,
        source: LogSource,
        output: OutputHistory,
        colors: ConsoleColors,
        enabled: bool = True,
        post: Optional[Callable[[Callable[[], None]], Any]] = None,
    ) -> None:
        self._source = source
        self._output = output
        self._colors = colors
        self.enabled = enabled
        self._post = post
        self._owner_thread = threading.get_ident()
        self._pending: "queue.SimpleQueue[LogEvent]" = queue.SimpleQueue()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        if self._active:
            return
        self._source.subscribe(self.on_log_event)
        self._active = True

    def deactivate(self) -> None:
        if not self._active:
            return
        self._active = False
        self._source.unsubscribe(self.on_log_event)

    def __enter__(self) -> "LogBridge":
        self.activate()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.deactivate()

    def on_log_event(self, message: str, trace: str, severity: Any) -> None:
        """LogSource callback; may be invoked from any thread."""
        if threading.get_ident() == self._owner_thread:
            self._write(message, trace, severity)
        elif self._post is not None:
            self._post(lambda: self._write(message, trace, severity))
        else:
            self._pending.put((message, trace, severity))

    def pump(self) -> int:
        """Write queued off-thread events; call from the owner thread."""
        written = 0
        while True:
            try:
                message, trace, severity = self._pending.get_nowait()
            except queue.Empty:
                return written
            self._write(message, trace, severity)
            written += 1

    def _write(self, message: str, trace: str, severity: Any) -> None:
        if not self.enabled:
            return
        if not message or not message.strip():
            return
        text, color = format_log_event(message, severity, self._colors)
        self._output.append(text, color)


class LoggingLogSource:
    """LogSource backed by the standard ``logging`` module.

    A handler is attached to ``logger_name`` (root by default) while there is
    at least one subscriber.
    """

    def __init__(
        self,
        logger_name: Optional[str] = None,
        level: int = logging.INFO,
        ignore_prefixes: Tuple[str, ...] = ("cosmic_console",),
    ) -> None:
        self._logger = logging.getLogger(logger_name)
        self._handler = _ForwardingHandler(self, level, ignore_prefixes)
        self._callbacks: list[LogCallback] = []

    @property
    def handler(self) -> logging.Handler:
        return self._handler

    def subscribe(self, callback: LogCallback) -> None:
        if not self._callbacks:
            self._logger.addHandler(self._handler)
        self._callbacks.append(callback)

    def unsubscribe(self, callback: LogCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)
        if not self._callbacks:
            self._logger.removeHandler(self._handler)

    def publish(self, message: str, trace: str, log_type: Any) -> None:
        for callback in list(self._callbacks):
            callback(message, trace, log_type)


def host_log_type(record: logging.LogRecord) -> HostLogType:
    if record.exc_info:
        return HostLogType.EXCEPTION
    if record.levelno >= logging.ERROR:
        return HostLogType.ERROR
    if record.levelno >= logging.WARNING:
        return HostLogType.WARNING
    return HostLogType.LOG


def record_trace(record: logging.LogRecord) -> str:
    if record.exc_info:
        return "".join(traceback.format_exception(*record.exc_info))
    return record.stack_info or ""


class _ForwardingHandler(logging.Handler):
    def __init__(
        self, source: LoggingLogSource, level: int, ignore_prefixes: Tuple[str, ...]
    ) -> None:
        super().__init__(level)
        self._source = source
        self._ignore_prefixes = ignore_prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix in self._ignore_prefixes:
            if record.name == prefix or record.name.startswith(prefix + "."):
                return False
        return bool(super().filter(record))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            trace = record_trace(record)
            self._source.publish(message, trace, host_log_type(record))
        except Exception:
            self.handleError(record)
