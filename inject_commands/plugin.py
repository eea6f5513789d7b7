"""The inject-commands plugin: hook handlers bound to validated options."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from inject_commands.config import CommandSpec, PluginSettings, parse_options
from inject_commands.hooks import HookHandler, HookRegistry, HookType, execute_commands, hook_name
from inject_commands.hooks.registry import HookTypeLike
from inject_commands.invoker import InvocationResult

log = logging.getLogger(__name__)

PLUGIN_NAME = "inject-commands"


class InjectCommandsPlugin:
    """
    Runs external scripts when the host build tool fires a hook.

    Constructing the plugin validates its options; an instance only exists in
    the configured state. The hook table and settings never change afterwards.
    The resolved build configuration is captured once, through
    :meth:`config_resolved` or the ``configResolved`` hook.
    """

    name = PLUGIN_NAME

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        parsed = parse_options({} if options is None else options)
        self.settings: PluginSettings = parsed.settings
        self.commands: Mapping[str, Tuple[CommandSpec, ...]] = parsed.hooks
        self._resolved_config: Any = None
        self._config_captured = False

        handlers: Dict[str, HookHandler] = {name: self._make_handler(name) for name in self.commands}
        handlers[HookType.CONFIG_RESOLVED.value] = self._on_config_resolved
        self.registry = HookRegistry(handlers)

        log.debug(
            "Plugin '%s' searching %s for '%s' files, hooks: %s",
            self.name,
            list(self.settings.paths),
            self.settings.extension,
            self.registry.names(),
        )

    @property
    def hooks(self) -> Mapping[str, HookHandler]:
        """Read-only mapping of hook name to async handler."""
        return self.registry.handlers

    @property
    def resolved_config(self) -> Any:
        return self._resolved_config

    def config_resolved(self, config: Any) -> None:
        """Capture the resolved build configuration; only the first call has an effect."""
        if self._config_captured:
            log.debug("Resolved configuration already captured, ignoring new value")
            return
        self._resolved_config = config
        self._config_captured = True

    async def execute(self, hook_type: HookTypeLike, *hook_args: Any) -> List[InvocationResult]:
        """
        Run the commands configured for a hook.

        Unlike the host-facing handlers this lets a directory read failure
        propagate.

        Raises:
            OSError: If a search directory cannot be read
        """
        name = hook_name(hook_type)
        commands = self.commands.get(name, ())
        if not commands:
            log.debug("No commands configured for hook '%s'", name)
            return []

        log.debug("hookArgs for '%s': %s", name, hook_args)
        return await execute_commands(
            commands,
            self.settings.paths,
            hook_args,
            self._resolved_config,
            extension=self.settings.extension,
            shell=self.settings.shell,
            forward_config=self.settings.forward_config,
        )

    async def fire(self, hook_type: HookTypeLike, *hook_args: Any) -> List[InvocationResult]:
        """
        Call the handler registered for a hook, as the host would.

        Raises:
            KeyError: If no handler is registered for the hook
        """
        handler = self.registry.get_handler(hook_type)
        return await handler(*hook_args)

    def to_plugin(self) -> Dict[str, Any]:
        """Return the plugin as a plain ``{"name": ..., <hook>: handler}`` mapping."""
        return {"name": self.name, **self.hooks}

    def _make_handler(self, name: str) -> HookHandler:
        async def handler(*hook_args: Any) -> List[InvocationResult]:
            return await self._run_hook(name, hook_args)

        handler.__name__ = name
        handler.__qualname__ = f"{type(self).__name__}.{name}"
        return handler

    async def _on_config_resolved(self, *hook_args: Any) -> List[InvocationResult]:
        if hook_args:
            self.config_resolved(hook_args[0])
        return await self._run_hook(HookType.CONFIG_RESOLVED.value, hook_args)

    async def _run_hook(self, name: str, hook_args: Sequence[Any]) -> List[InvocationResult]:
        try:
            return await self.execute(name, *hook_args)
        except OSError as exc:
            log.error("Failed to search for executables, skipping hook '%s': %s", name, exc)
            return []


def inject_commands(options: Optional[Mapping[str, Any]] = None) -> InjectCommandsPlugin:
    """
    Create the plugin.

    Args:
        options: ``paths`` (directories searched for scripts, default ``["./"]``),
            the optional ``extension``, ``shell``, ``forward_config`` and
            ``extra_hooks`` settings, and one key per hook mapping to a list of
            ``{"command", "args", "executor"}`` entries.

    Raises:
        ConfigurationError: If the options are invalid
    """
    return InjectCommandsPlugin(options)
