from typing import List, Sequence

import pytest
from conftest import RecordingSink

from cosmic_console.console.dispatcher import Dispatcher, split_command_line
from cosmic_console.console.output import OutputHistory
from cosmic_console.console.registry import CommandRegistry

ERROR = "FF8080"


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def dispatcher(registry: CommandRegistry, sink: RecordingSink) -> Dispatcher:
    return Dispatcher(registry, OutputHistory(sink), ERROR)


@pytest.mark.parametrize(
    "line,alias,arguments",
    [
        ("move 10 20", "move", ["10", "20"]),
        ("help", "help", []),
        ("say  hi", "say", ["", "hi"]),
        ("trail ", "trail", [""]),
        (" lead", "", ["lead"]),
        ('quote "a b"', "quote", ['"a', 'b"']),
    ],
)
def test_split_command_line(line: str, alias: str, arguments: List[str]) -> None:
    assert split_command_line(line) == (alias, arguments)


def test_dispatch_passes_arguments(
    dispatcher: Dispatcher, registry: CommandRegistry, sink: RecordingSink
) -> None:
    calls: List[Sequence[str]] = []
    registry.register("move", calls.append)

    assert dispatcher.dispatch("move 10 20") == 1
    assert calls == [["10", "20"]]
    assert sink.created == []


def test_dispatch_single_token_gives_empty_arguments(
    dispatcher: Dispatcher, registry: CommandRegistry
) -> None:
    calls: List[Sequence[str]] = []
    registry.register("status", calls.append)
    dispatcher.dispatch("status")
    assert calls == [[]]


def test_dispatch_unknown_alias_reports_one_error(
    dispatcher: Dispatcher, registry: CommandRegistry, sink: RecordingSink
) -> None:
    calls: List[Sequence[str]] = []
    registry.register("other", calls.append)

    assert dispatcher.dispatch("nope") == 0
    assert calls == []
    assert len(sink.created) == 1
    _, entry = sink.created[0]
    assert entry.text == 'There is no Command with the alias "nope".'
    assert entry.color == ERROR


def test_dispatch_unknown_alias_escapes_markup(
    dispatcher: Dispatcher, sink: RecordingSink
) -> None:
    dispatcher.dispatch("[bold]x")
    assert sink.texts == ['There is no Command with the alias "\\[bold]x".']


def test_dispatch_runs_every_match_in_order(
    dispatcher: Dispatcher, registry: CommandRegistry
) -> None:
    order: List[str] = []
    registry.register("ping", lambda args: order.append("first"))
    registry.register("pong", lambda args: order.append("other"))
    registry.register("ping", lambda args: order.append("second"))

    assert dispatcher.dispatch("ping") == 2
    assert order == ["first", "second"]


def test_each_handler_gets_its_own_argument_list(
    dispatcher: Dispatcher, registry: CommandRegistry
) -> None:
    seen: List[List[str]] = []

    def greedy(args: List[str]) -> None:
        args.clear()

    registry.register("x", greedy)
    registry.register("x", lambda args: seen.append(list(args)))
    dispatcher.dispatch("x a b")
    assert seen == [["a", "b"]]


def test_handler_errors_propagate(dispatcher: Dispatcher, registry: CommandRegistry) -> None:
    def boom(args: Sequence[str]) -> None:
        raise RuntimeError("boom")

    registry.register("boom", boom)
    with pytest.raises(RuntimeError, match="boom"):
        dispatcher.dispatch("boom")
