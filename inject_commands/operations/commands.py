"""Command-line operations acting as a host for the plugin."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List

from inject_commands.hooks import HookType
from inject_commands.operations.registry import register
from inject_commands.plugin import InjectCommandsPlugin
from inject_commands.resolver import resolve_command
from inject_commands.walker import find_executables

log = logging.getLogger(__name__)


def _decode_hook_args(raw_args: List[str]) -> List[Any]:
    decoded: List[Any] = []
    for arg in raw_args:
        try:
            decoded.append(json.loads(arg))
        except ValueError:
            decoded.append(arg)
    return decoded


@register("run", usage="HOOK [ARGS...]", desc="Fire a hook and run its configured commands.")
def run_hook(env: Dict, plugin: InjectCommandsPlugin, hook: str, *hook_args: str) -> bool:
    """Fire a hook and run its configured commands."""

    if hook not in plugin.commands:
        log.error("No commands configured for hook '%s'. Configured hooks: %s", hook, ", ".join(plugin.commands))
        return False

    args: List[Any] = _decode_hook_args(list(hook_args)) if env.get("json_args") else list(hook_args)
    build_config = env.get("build_config")
    if hook == HookType.CONFIG_RESOLVED.value:
        if build_config is not None:
            args.insert(0, build_config)
        if args:
            plugin.config_resolved(args[0])
    elif build_config is not None:
        plugin.config_resolved(build_config)

    try:
        results = asyncio.run(plugin.execute(hook, *args))
    except OSError as exc:
        log.error("Failed to search for executables: %s", exc)
        return False

    failed = [result for result in results if not result.success]
    for result in results:
        status = "ok" if result.success else "FAILED"
        log.info("[%s] %s (%.2fs)", status, result.command_line or result.spec.command, result.duration)
    if failed:
        log.error("%d of %d commands failed for hook '%s'", len(failed), len(results), hook)
        return False
    return True


@register("list", desc="List executables found under the configured paths.")
def list_executables(env: Dict, plugin: InjectCommandsPlugin) -> bool:
    """List executables found under the configured paths."""

    _ = env
    try:
        found = asyncio.run(find_executables(plugin.settings.paths, plugin.settings.extension))
    except OSError as exc:
        log.error("Failed to search for executables: %s", exc)
        return False

    for path in found:
        print(path)
    return True


@register("resolve", usage="COMMAND", desc="Show which executable a command resolves to.")
def resolve(env: Dict, plugin: InjectCommandsPlugin, command: str) -> bool:
    """Show which executable a command resolves to."""

    _ = env
    try:
        found = asyncio.run(find_executables(plugin.settings.paths, plugin.settings.extension))
    except OSError as exc:
        log.error("Failed to search for executables: %s", exc)
        return False

    executable = resolve_command(found, command)
    if executable is None:
        log.error("Command %s not found.", command)
        return False
    print(executable)
    return True


@register("hooks", desc="Show configured hooks and their commands.")
def list_hooks(env: Dict, plugin: InjectCommandsPlugin) -> bool:
    """Show configured hooks and their commands."""

    _ = env
    for hook, commands in plugin.commands.items():
        print(f"{hook}:")
        for spec in commands:
            words = [spec.executor or "", spec.command, *spec.args]
            print(f"  {' '.join(word for word in words if word)}")
    return True
