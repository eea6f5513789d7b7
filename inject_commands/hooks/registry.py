"""Known hook names and the read-only table of hook handlers."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, Iterator, Mapping, Tuple, Union


class HookType(Enum):
    """Lifecycle hooks a host build tool may fire."""

    # Vite specific
    CONFIG = "config"
    CONFIG_RESOLVED = "configResolved"
    CONFIGURE_SERVER = "configureServer"
    CONFIGURE_PREVIEW_SERVER = "configurePreviewServer"
    TRANSFORM_INDEX_HTML = "transformIndexHtml"
    HANDLE_HOT_UPDATE = "handleHotUpdate"

    # Build
    OPTIONS = "options"
    BUILD_START = "buildStart"
    RESOLVE_ID = "resolveId"
    LOAD = "load"
    TRANSFORM = "transform"
    MODULE_PARSED = "moduleParsed"
    WATCH_CHANGE = "watchChange"
    BUILD_END = "buildEnd"
    CLOSE_WATCHER = "closeWatcher"

    # Output generation
    OUTPUT_OPTIONS = "outputOptions"
    RENDER_START = "renderStart"
    RENDER_CHUNK = "renderChunk"
    RENDER_ERROR = "renderError"
    GENERATE_BUNDLE = "generateBundle"
    WRITE_BUNDLE = "writeBundle"
    CLOSE_BUNDLE = "closeBundle"

    # Generic build stages
    PRE_BUILD = "pre_build"
    BUILD = "build"
    POST_BUILD = "post_build"


HookTypeLike = Union[str, HookType]
HookHandler = Callable[..., Awaitable[Any]]


def hook_name(hook_type: HookTypeLike) -> str:
    """Return the string name for ``hook_type``."""
    return hook_type.value if isinstance(hook_type, HookType) else str(hook_type)


def allowed_hook_names(extra_hooks: Iterable[str] = ()) -> FrozenSet[str]:
    """Return the known hook names plus ``extra_hooks``."""
    return frozenset(member.value for member in HookType) | frozenset(extra_hooks)


class HookRegistry:
    """Hook name to handler table, fixed once constructed."""

    def __init__(self, handlers: Mapping[str, HookHandler]):
        self._handlers: Mapping[str, HookHandler] = MappingProxyType(dict(handlers))

    @property
    def handlers(self) -> Mapping[str, HookHandler]:
        """Read-only view of the registered handlers."""
        return self._handlers

    def names(self) -> Tuple[str, ...]:
        return tuple(self._handlers)

    def get_handler(self, hook_type: HookTypeLike) -> HookHandler:
        """
        Get the handler registered for a hook.

        Raises:
            KeyError: If no handler is registered for the hook
        """
        name = hook_name(hook_type)
        try:
            return self._handlers[name]
        except KeyError:
            raise KeyError(f"No handler registered for hook '{name}'") from None

    def __contains__(self, hook_type: object) -> bool:
        if not isinstance(hook_type, (str, HookType)):
            return False
        return hook_name(hook_type) in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)
