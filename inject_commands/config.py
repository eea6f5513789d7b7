"""Plugin options: validation models and TOML config file loading."""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from inject_commands.errors import ConfigurationError
from inject_commands.hooks.registry import allowed_hook_names

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_PATHS: Tuple[str, ...] = ("./",)
DEFAULT_EXTENSION = ".py"
RESERVED_KEYS: Tuple[str, ...] = ("paths", "extension", "shell", "forward_config", "extra_hooks")

CONFIG_FILE_NAME = "inject-commands.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"
PYPROJECT_TABLE = "inject-commands"

EMPTY_PATHS_MESSAGE = "You must specify at least one directory to search for scripts."


class CommandSpec(BaseModel):
    """A command to run when a hook fires."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: str = Field(..., description="Logical command name, matched as a path suffix")
    args: Tuple[str, ...] = Field(default_factory=tuple, description="Arguments placed after the command")
    executor: Optional[str] = Field(None, description="Interpreter used to run the resolved file")

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        """Validate command is not empty and splits into shell words."""
        if not v or not v.strip():
            raise ValueError("command cannot be empty")
        try:
            shlex.split(v)
        except ValueError as exc:
            raise ValueError(f"command cannot be split into words: {exc}") from exc
        return v

    @field_validator("args", mode="before")
    @classmethod
    def default_args(cls, v: Any) -> Any:
        """Treat a missing argument list as empty."""
        if v is None:
            return ()
        return v

    @field_validator("executor")
    @classmethod
    def blank_executor_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty executor means the command runs directly."""
        if v is None or not v.strip():
            return None
        try:
            shlex.split(v)
        except ValueError as exc:
            raise ValueError(f"executor cannot be split into words: {exc}") from exc
        return v


class PluginSettings(BaseModel):
    """Options that are not hook names."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    paths: Tuple[str, ...] = Field(DEFAULT_PATHS, min_length=1, description="Directories searched for executables")
    extension: str = Field(DEFAULT_EXTENSION, description="Extension of discovered files")
    shell: bool = Field(False, description="Run commands through the platform shell")
    forward_config: bool = Field(True, description="Append the resolved build configuration to every command")
    extra_hooks: Tuple[str, ...] = Field(default_factory=tuple, description="Hook names accepted besides the known set")

    @field_validator("paths", mode="before")
    @classmethod
    def validate_paths(cls, v: Any) -> Any:
        """Reject a single string where a list of directories is expected."""
        if isinstance(v, (str, Path)):
            raise ValueError("paths must be a list of directories")
        if isinstance(v, (list, tuple)):
            return [os.fspath(p) if isinstance(p, os.PathLike) else p for p in v]
        return v

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Validate extension looks like ``.py``."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"extension must start with '.', got: {v!r}")
        if v.count(".") != 1:
            raise ValueError(f"extension must be a single suffix such as '.py', got: {v!r}")
        return v


@dataclass(frozen=True)
class PluginOptions:
    """Validated plugin options."""

    settings: PluginSettings
    hooks: Mapping[str, Tuple[CommandSpec, ...]]


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def parse_options(options: Any) -> PluginOptions:
    """Validate raw plugin options.

    Args:
        options: Mapping of plugin options. ``paths`` and the other reserved keys
            configure the plugin, every remaining key is a hook name mapped to a
            list of commands.

    Returns:
        PluginOptions: Validated settings and a read-only hook table

    Raises:
        ConfigurationError: If options are not a mapping, no search directory is
            given, a hook name is unknown or a command is invalid
    """
    if not isinstance(options, Mapping):
        raise ConfigurationError("Options must be an object", {"type": type(options).__name__})

    if "paths" in options and not options["paths"]:
        raise ConfigurationError(EMPTY_PATHS_MESSAGE, {"paths": options["paths"]})

    raw_settings = {key: options[key] for key in RESERVED_KEYS if key in options}
    try:
        settings = PluginSettings(**raw_settings)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid plugin options: {_format_validation_error(exc)}", {"errors": exc.errors()}
        ) from exc

    allowed = allowed_hook_names(settings.extra_hooks)
    hooks: Dict[str, Tuple[CommandSpec, ...]] = {}

    for hook, command_data in options.items():
        if hook in RESERVED_KEYS:
            continue
        if hook not in allowed:
            raise ConfigurationError(
                f"Unknown hook '{hook}'. Add it to extra_hooks to accept it.",
                {"hook": hook, "known_hooks": sorted(allowed)},
            )
        if isinstance(command_data, (str, bytes)) or not isinstance(command_data, Sequence):
            raise ConfigurationError(f"Hook '{hook}' must map to a list of commands", {"hook": hook})
        try:
            hooks[hook] = tuple(CommandSpec.model_validate(item) for item in command_data)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid command for hook '{hook}': {_format_validation_error(exc)}",
                {"hook": hook, "errors": exc.errors()},
            ) from exc

    log.debug("Configured %d hooks: %s", len(hooks), list(hooks))
    return PluginOptions(settings=settings, hooks=MappingProxyType(hooks))


def load_options_file(path: PathLike) -> Dict[str, Any]:
    """Load raw plugin options from a TOML file.

    ``pyproject.toml`` files are read from their ``[tool.inject-commands]`` table,
    any other file is taken whole.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid TOML
    """
    cfg_path = Path(path)
    try:
        data = toml.load(cfg_path)
    except toml.TomlDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in config file: {cfg_path}", {"error": str(exc)}) from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file: {cfg_path}", {"error": str(exc)}) from exc

    if cfg_path.name == PYPROJECT_FILE_NAME:
        data = data.get("tool", {}).get(PYPROJECT_TABLE, {})
    log.debug("Loaded options from %s: %s", cfg_path, data)
    return data


def find_options_file(root: Optional[PathLike] = None) -> Optional[Path]:
    """Return the config file used when none is given explicitly.

    ``inject-commands.toml`` wins over a ``pyproject.toml`` carrying a
    ``[tool.inject-commands]`` table.
    """
    base = Path(root) if root is not None else Path.cwd()

    candidate = base / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate

    pyproject = base / PYPROJECT_FILE_NAME
    if pyproject.is_file():
        try:
            data = toml.load(pyproject)
        except (OSError, toml.TomlDecodeError) as exc:
            log.warning("Ignoring unreadable %s: %s", pyproject, exc)
            return None
        if PYPROJECT_TABLE in data.get("tool", {}):
            return pyproject
    return None


def load_options(path: Optional[PathLike] = None, root: Optional[PathLike] = None) -> Dict[str, Any]:
    """Load raw options from ``path``, or from the discovered config file, or return defaults."""
    if path is not None:
        return load_options_file(path)

    found = find_options_file(root)
    if found is None:
        log.debug("No config file found, using default options")
        return {}
    return load_options_file(found)


__all__ = [
    "CommandSpec",
    "PluginSettings",
    "PluginOptions",
    "parse_options",
    "load_options_file",
    "find_options_file",
    "load_options",
    "DEFAULT_PATHS",
    "RESERVED_KEYS",
]
