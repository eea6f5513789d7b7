"""Run the commands configured for a hook."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Sequence

from inject_commands.errors import ResolutionFailure, SubprocessError
from inject_commands.invoker import InvocationResult, invoke_command
from inject_commands.resolver import resolve_command
from inject_commands.walker import find_executables

if TYPE_CHECKING:
    from inject_commands.config import CommandSpec

log = logging.getLogger(__name__)


def collect_extra_arguments(hook_args: Sequence[Any], config: Any = None, forward_config: bool = True) -> List[Any]:
    """
    Return the values appended to every command line of a hook firing.

    The resolved configuration goes last, unless it was not captured, forwarding
    is off, or the same object is already one of the hook arguments.
    """
    extra_args = list(hook_args)
    if forward_config and config is not None and not any(arg is config for arg in hook_args):
        extra_args.append(config)
    return extra_args


async def execute_commands(
    commands: Iterable[CommandSpec],
    directories: Sequence[str],
    hook_args: Sequence[Any] = (),
    config: Any = None,
    *,
    extension: str = ".py",
    shell: bool = False,
    forward_config: bool = True,
) -> List[InvocationResult]:
    """
    Search ``directories`` once, then run every command in order.

    A command that cannot be resolved or fails is logged and recorded; the
    remaining commands still run.

    Args:
        commands: Commands in declaration order
        directories: Directories to search for executables
        hook_args: Arguments the host passed to the hook
        config: Resolved build configuration, if captured
        extension: Extension of discoverable executables
        shell: Run command lines through the platform shell
        forward_config: Append ``config`` to the extra arguments

    Returns:
        One InvocationResult per command

    Raises:
        OSError: If a search directory cannot be read. No command runs.
    """
    found_executables = await find_executables(directories, extension)
    extra_args = collect_extra_arguments(hook_args, config, forward_config)

    results: List[InvocationResult] = []
    for spec in commands:
        executable = resolve_command(found_executables, spec.command)
        log.debug("Command '%s' resolved to %s", spec.command, executable)

        try:
            result = await invoke_command(spec, executable, extra_args, shell=shell)
        except ResolutionFailure as exc:
            log.error("%s", exc.message)
            result = InvocationResult(spec=spec, executable=None, error=exc)
        except SubprocessError as exc:
            log.error("%s", exc.message)
            result = InvocationResult(
                spec=spec,
                executable=executable,
                command_line=exc.command_line,
                argv=exc.argv,
                returncode=exc.returncode,
                stderr=exc.stderr,
                duration=exc.duration,
                error=exc,
            )
        else:
            log.info("%s", result.stdout)

        results.append(result)

    failed = sum(1 for result in results if not result.success)
    log.debug("Ran %d commands, %d failed", len(results), failed)
    return results
