import logging
from typing import Any, Hashable, List, Optional, Protocol, Tuple

from cosmic_console.console.state import OutputEntry

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    """Rendering surface that owns the visual entries."""

    def create_entry(self, entry: OutputEntry) -> Hashable:
        """Render ``entry`` and return a handle for later destruction."""
        ...

    def destroy_entry(self, handle: Any) -> None:
        ...

    def notify_scroll_to_latest(self) -> None:
        ...


def sanitize(text: str) -> str:
    """Drop carriage returns and line feeds; lines are never split."""
    return text.replace("\r", "").replace("\n", "")


class OutputHistory:
    """Ordered record of the entries handed to the sink, cleared as a unit."""

    def __init__(self, sink: OutputSink) -> None:
        self._sink = sink
        self._records: List[Tuple[Any, OutputEntry]] = []

    def append(self, text: str, color: str) -> Optional[OutputEntry]:
        text = sanitize(text)
        if not text.strip():
            return None
        entry = OutputEntry(text=text, color=color)
        handle = self._sink.create_entry(entry)
        self._records.append((handle, entry))
        self._sink.notify_scroll_to_latest()
        return entry

    def clear_all(self) -> None:
        logger.debug("Clearing %d console entries", len(self._records))
        # A handle leaves the history only once the sink has destroyed it.
        while self._records:
            handle, _ = self._records[0]
            self._sink.destroy_entry(handle)
            del self._records[0]

    @property
    def entries(self) -> Tuple[OutputEntry, ...]:
        return tuple(entry for _, entry in self._records)

    def __len__(self) -> int:
        return len(self._records)
