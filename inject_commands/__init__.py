"""
Run external scripts at build-tool lifecycle hooks.
"""

from inject_commands.config import CommandSpec, PluginSettings, load_options, parse_options
from inject_commands.errors import (
    ConfigurationError,
    InjectCommandsError,
    ResolutionFailure,
    SubprocessError,
)
from inject_commands.hooks import HookType
from inject_commands.invoker import InvocationResult, serialize_argument
from inject_commands.plugin import PLUGIN_NAME, InjectCommandsPlugin, inject_commands
from inject_commands.resolver import resolve_command
from inject_commands.walker import find_executables

__all__ = [
    "PLUGIN_NAME",
    "InjectCommandsPlugin",
    "inject_commands",
    "CommandSpec",
    "PluginSettings",
    "HookType",
    "InvocationResult",
    "load_options",
    "parse_options",
    "find_executables",
    "resolve_command",
    "serialize_argument",
    "InjectCommandsError",
    "ConfigurationError",
    "ResolutionFailure",
    "SubprocessError",
]
