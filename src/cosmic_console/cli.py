import asyncio
import logging
from typing import Awaitable, Callable, Optional

import typer
from typing_extensions import Annotated

from cosmic_console.console.console import ConsoleConfigurationError
from cosmic_console.console.demo_commands import register_demo_commands
from cosmic_console.console.fullscreen_console import FullscreenConsole
from cosmic_console.console.log_bridge import LoggingLogSource
from cosmic_console.logger import setup_logging
from cosmic_console.runtime_config import (
    DEFAULT_TOGGLE_KEY,
    HOST_LOG_ENV,
    LOG_LEVEL_ENV,
    TOGGLE_KEY_ENV,
    ConsoleConfig,
    get_data_dir,
    load_envs,
)

ConsoleRunner = Callable[[ConsoleConfig], Awaitable[None]]

# Global factory - set by create_app()
_console_runner: Optional[ConsoleRunner] = None


async def run_fullscreen_console(config: ConsoleConfig) -> None:
    """Default runner: the full-screen overlay mirroring the root logger."""
    loop = asyncio.get_running_loop()
    history_dir = get_data_dir()
    history_dir.mkdir(parents=True, exist_ok=True)

    fullscreen = FullscreenConsole(
        config,
        scheduler=loop,
        log_source=LoggingLogSource(),
        post=loop.call_soon_threadsafe,
        history_path=history_dir / "input_history",
    )
    register_demo_commands(fullscreen.console)
    await fullscreen.run()


def main(
    toggle_key: Annotated[
        str,
        typer.Option(envvar=TOGGLE_KEY_ENV, help="Key that opens and closes the console"),
    ] = DEFAULT_TOGGLE_KEY,
    welcome: Annotated[
        bool, typer.Option("--welcome/--no-welcome", help="Print the welcome banner")
    ] = True,
    host_log: Annotated[
        bool,
        typer.Option(
            "--host-log/--no-host-log",
            envvar=HOST_LOG_ENV,
            help="Mirror Python logging records into the console",
        ),
    ] = True,
    start_open: Annotated[
        bool, typer.Option("--start-open", help="Show the console immediately")
    ] = False,
    debounce: Annotated[
        float,
        typer.Option("--debounce", help="Seconds before the toggle key is honoured again"),
    ] = 1.0,
    log_level: Annotated[
        str, typer.Option(envvar=LOG_LEVEL_ENV, help="Level of the console's own log file")
    ] = "INFO",
) -> None:
    """COSMIC CONSOLE - starts the developer console overlay"""
    if debounce < 0:
        typer.echo("Error: --debounce must not be negative", err=True)
        raise typer.Exit(code=1)

    log_file = setup_logging(log_level)
    logger = logging.getLogger(__name__)

    cfg = ConsoleConfig(
        toggle_key=toggle_key,
        print_welcome=welcome,
        print_host_log=host_log,
        start_open=start_open,
        debounce_delay=debounce,
    )
    logger.info(f"Starting console (toggle key {cfg.toggle_key}), logging to {log_file}")

    runner = _console_runner or run_fullscreen_console
    try:
        asyncio.run(runner(cfg))
    except ConsoleConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        print("\nExiting...")


def create_app(console_runner: Optional[ConsoleRunner] = None) -> typer.Typer:
    """
    Create and configure the Typer application.

    Args:
        console_runner: Coroutine function that runs a console for a ConsoleConfig

    Returns:
        Typer application
    """
    # Load settings from .env if not already set in the environment
    load_envs()

    global _console_runner
    _console_runner = console_runner

    app = typer.Typer(rich_markup_mode=None)
    app.command()(main)
    return app


# Create default app instance for backward compatibility
app = create_app()


if __name__ == "__main__":
    app()
