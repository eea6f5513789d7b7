"""
Hook table and command execution for hook firings.
"""

from inject_commands.hooks.executor import collect_extra_arguments, execute_commands
from inject_commands.hooks.registry import (
    HookHandler,
    HookRegistry,
    HookType,
    allowed_hook_names,
    hook_name,
)

__all__ = [
    # Enums
    "HookType",
    # Registry
    "HookHandler",
    "HookRegistry",
    "allowed_hook_names",
    "hook_name",
    # Execution functions
    "execute_commands",
    "collect_extra_arguments",
]
