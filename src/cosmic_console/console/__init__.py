"""
Console subpackage: command registry, dispatcher, output history, session state machine and log bridge.
"""

from cosmic_console.console.console import ConsoleConfigurationError, DeveloperConsole
from cosmic_console.console.log_bridge import LogBridge, LoggingLogSource
from cosmic_console.console.output import OutputHistory, OutputSink
from cosmic_console.console.registry import CommandRegistry
from cosmic_console.console.session import ConsoleSession

__all__ = [
    "CommandRegistry",
    "ConsoleConfigurationError",
    "ConsoleSession",
    "DeveloperConsole",
    "LogBridge",
    "LoggingLogSource",
    "OutputHistory",
    "OutputSink",
]
