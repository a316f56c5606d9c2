import io

from rich.console import Console
from rich.text import Text

from cosmic_console.console.state import OutputEntry


def entry_to_text(entry: OutputEntry) -> Text:
    """Parse an entry's markup with its colour as the base style."""
    return Text.from_markup(entry.text, style=f"#{entry.color}")


def render_entry(entry: OutputEntry, width: int = 80) -> str:
    """Render a single entry to an ANSI string (no trailing newline)."""
    buf = io.StringIO()
    console = Console(
        file=buf,
        width=width,
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )
    console.print(entry_to_text(entry), soft_wrap=True)
    return buf.getvalue().rstrip("\n")
