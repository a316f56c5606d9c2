import platform
from typing import TYPE_CHECKING, Sequence

from rich.markup import escape

if TYPE_CHECKING:
    from cosmic_console.console.console import DeveloperConsole

HELP_HEADER = "=========== CosmicConsole ==========="
HELP_FOOTER = "====================================="
NO_HELP_NOTICE = "There is no help defined for this command."
QUIT_FAILED = "Quitting Failed..."


def color_markup(text: str, color: str) -> str:
    """Wrap already-escaped ``text`` in a rich colour tag."""
    return f"[#{color}]{text}[/]"


def register_builtin_commands(console: "DeveloperConsole") -> None:
    """Register help, quit, clear and cls on the given console."""
    colors = console.config.colors

    def describe(alias: str, description: str) -> str:
        return (
            f"{color_markup(escape(alias), colors.info)}"
            f" = {color_markup(escape(description), colors.warning)}"
        )

    def cmd_help(args: Sequence[str]) -> None:
        if not args:
            console.send(HELP_HEADER)
            for command in console.registry.list_commands():
                if not command.listed:
                    continue
                console.send(describe(command.alias, command.description or ""))
            console.send(HELP_FOOTER)
            return

        # An alias nobody registered prints nothing at all.
        for command in console.registry.lookup(args[0]):
            if not command.listed:
                console.send(NO_HELP_NOTICE, colors.warning)
                continue
            console.send(describe(command.alias, command.description or ""))

    def cmd_quit(args: Sequence[str]) -> None:
        if not console.request_quit():
            console.send(QUIT_FAILED, colors.error)

    def cmd_clear(args: Sequence[str]) -> None:
        console.history.clear_all()

    console.add_command("help", cmd_help, "Shows the help list")
    console.add_command("quit", cmd_quit, "Quits the application.")
    console.add_command("clear", cmd_clear, 'Clears the console. ("cls" works too)')
    console.add_command("cls", cmd_clear)


def send_welcome(console: "DeveloperConsole") -> None:
    color = console.config.colors.info
    console.send("- Thank you for using CosmicConsole! -", color)
    console.send(
        f"Running on {platform.system() or 'an unknown platform'}"
        f" with Python {platform.python_version()}.",
        color,
    )
    console.send(HELP_FOOTER, color)
