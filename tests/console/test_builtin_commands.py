from typing import List, Sequence

import pytest
from conftest import ManualScheduler, RecordingSink

from cosmic_console.console.builtin_commands import (
    HELP_FOOTER,
    HELP_HEADER,
    NO_HELP_NOTICE,
    QUIT_FAILED,
)
from cosmic_console.console.console import DeveloperConsole
from cosmic_console.runtime_config import ConsoleConfig

QUIET = ConsoleConfig(print_welcome=False)
COLORS = QUIET.colors


def help_line(alias: str, description: str) -> str:
    return f"[#{COLORS.info}]{alias}[/] = [#{COLORS.warning}]{description}[/]"


def noop(args: Sequence[str]) -> None:
    pass


def test_builtins_are_registered(console: DeveloperConsole) -> None:
    assert console.registry.aliases() == ["help", "quit", "clear", "cls"]
    assert console.registry.lookup("cls")[0].description is None
    assert (
        console.registry.lookup("cls")[0].handler
        is console.registry.lookup("clear")[0].handler
    )


def test_help_lists_described_commands_between_banners(
    console: DeveloperConsole, sink: RecordingSink
) -> None:
    console.add_command("move", noop, "Moves the player")
    console.add_command("secret", noop)
    console.add_command("blank", noop, "")

    console.submit("help")

    assert sink.texts == [
        HELP_HEADER,
        help_line("help", "Shows the help list"),
        help_line("quit", "Quits the application."),
        help_line("clear", 'Clears the console. ("cls" works too)'),
        help_line("move", "Moves the player"),
        HELP_FOOTER,
    ]


def test_help_for_alias(console: DeveloperConsole, sink: RecordingSink) -> None:
    console.add_command("move", noop, "Moves the player")
    console.submit("help move")
    assert sink.texts == [help_line("move", "Moves the player")]


def test_help_for_undescribed_alias(console: DeveloperConsole, sink: RecordingSink) -> None:
    console.submit("help cls")
    assert sink.texts == [NO_HELP_NOTICE]
    assert sink.created[0][1].color == COLORS.warning


def test_help_for_shared_alias_covers_every_command(
    console: DeveloperConsole, sink: RecordingSink
) -> None:
    console.add_command("ping", noop, "First ping")
    console.add_command("ping", noop)
    console.add_command("ping", noop, "Third ping")

    console.submit("help ping")

    assert sink.texts == [
        help_line("ping", "First ping"),
        NO_HELP_NOTICE,
        help_line("ping", "Third ping"),
    ]


def test_help_for_unknown_alias_prints_nothing(
    console: DeveloperConsole, sink: RecordingSink
) -> None:
    console.submit("help nothing-here")
    assert sink.created == []


def test_help_escapes_descriptions(console: DeveloperConsole, sink: RecordingSink) -> None:
    console.add_command("tag", noop, "Adds [bold] tags")
    console.submit("help tag")
    assert sink.texts == [help_line("tag", "Adds \\[bold] tags")]


@pytest.mark.parametrize("alias", ["clear", "cls"])
def test_clear_removes_all_entries(
    console: DeveloperConsole, sink: RecordingSink, alias: str
) -> None:
    console.send("one")
    console.send("two")
    console.submit(alias)

    assert len(console.history) == 0
    assert sink.live_texts == []
    assert len(console.registry) == 4


def test_quit_refused_reports_failure(
    sink: RecordingSink, scheduler: ManualScheduler
) -> None:
    requests: List[bool] = []

    def refuse() -> bool:
        requests.append(True)
        return False

    console = DeveloperConsole(sink, scheduler, config=QUIET, request_quit=refuse)
    console.submit("quit")

    assert requests == [True]
    assert sink.texts == [QUIT_FAILED]
    assert sink.created[0][1].color == COLORS.error


def test_quit_returning_none_counts_as_refused(
    sink: RecordingSink, scheduler: ManualScheduler
) -> None:
    console = DeveloperConsole(sink, scheduler, config=QUIET, request_quit=lambda: None)
    console.submit("quit")
    assert sink.texts == [QUIT_FAILED]


def test_quit_accepted_prints_nothing(sink: RecordingSink, scheduler: ManualScheduler) -> None:
    console = DeveloperConsole(sink, scheduler, config=QUIET, request_quit=lambda: True)
    console.submit("quit")
    assert sink.created == []


def test_default_quit_exits_the_process(
    sink: RecordingSink, scheduler: ManualScheduler
) -> None:
    console = DeveloperConsole(sink, scheduler, config=QUIET)
    with pytest.raises(SystemExit):
        console.submit("quit")
    assert sink.created == []


def test_welcome_banner(sink: RecordingSink, scheduler: ManualScheduler) -> None:
    DeveloperConsole(sink, scheduler)
    assert sink.texts[0] == "- Thank you for using CosmicConsole! -"
    assert sink.texts[1].startswith("Running on ")
    assert sink.texts[2] == HELP_FOOTER
    assert {entry.color for _, entry in sink.created} == {COLORS.info}
