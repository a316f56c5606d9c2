"""
Runtime configuration for CosmicConsole.

This module provides:
- load_envs(): load the COSMIC_CONSOLE_* settings from a .env file
  if they are not already present in the environment.
- ConsoleColors / ConsoleConfig: dataclasses holding the colour palette and
  the behavioural switches of a console instance.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Environment variable names for the CLI fallbacks
TOGGLE_KEY_ENV: str = "COSMIC_CONSOLE_TOGGLE_KEY"
LOG_LEVEL_ENV: str = "COSMIC_CONSOLE_LOG_LEVEL"
HOST_LOG_ENV: str = "COSMIC_CONSOLE_HOST_LOG"

DEFAULT_TOGGLE_KEY: str = "f12"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load COSMIC_CONSOLE_TOGGLE_KEY, COSMIC_CONSOLE_LOG_LEVEL and COSMIC_CONSOLE_HOST_LOG
    from a .env file into the process environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (TOGGLE_KEY_ENV, LOG_LEVEL_ENV, HOST_LOG_ENV):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


@dataclass(frozen=True)
class ConsoleColors:
    """Colour tags (RRGGBB hex) used for console entries."""

    normal: str = "FFFFFF"
    warning: str = "FFFF00"
    error: str = "FF8080"
    info: str = "00FFFF"


@dataclass(frozen=True)
class ConsoleConfig:
    """
    Holds the settings of one console instance.

    Attributes:
        toggle_key: prompt_toolkit key name that opens/closes the console.
        print_welcome: Print the welcome banner when the console is built.
        print_host_log: Mirror host log events into the console output.
        reposition_on_close: Move the console back to its origin when closed.
        start_open: Whether the console starts visible.
        debounce_delay: Seconds before a toggle press is honoured again.
        tick_interval: Seconds between two polls of the toggle key.
        colors: The colour palette.
    """

    toggle_key: str = DEFAULT_TOGGLE_KEY
    print_welcome: bool = True
    print_host_log: bool = True
    reposition_on_close: bool = True
    start_open: bool = False
    debounce_delay: float = 1.0
    tick_interval: float = 0.05
    colors: ConsoleColors = field(default_factory=ConsoleColors)


def get_data_dir() -> Path:
    """
    Return the CosmicConsole data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "cosmic_console"
