"""Build and run the subprocess for a single configured command."""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

from inject_commands.errors import InjectCommandsError, ResolutionFailure, SubprocessError

if TYPE_CHECKING:
    from inject_commands.config import CommandSpec

log = logging.getLogger(__name__)


@dataclass(slots=True)
class InvocationResult:
    """Outcome of running one command."""

    spec: CommandSpec
    executable: Optional[str]
    command_line: str = ""
    argv: Tuple[str, ...] = ()
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    error: Optional[InjectCommandsError] = None

    @property
    def success(self) -> bool:
        return self.error is None


def serialize_argument(value: Any) -> str:
    """
    Render a hook argument as a command-line token.

    Strings pass through unchanged. Anything else, ``None`` included, is encoded
    as compact JSON; values JSON cannot represent fall back to ``str``.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def serialize_arguments(values: Iterable[Any]) -> List[str]:
    return [serialize_argument(value) for value in values]


def _head(spec: CommandSpec, executable: Optional[str]) -> List[str]:
    if not spec.executor:
        return [spec.command]
    if executable is None:
        raise ResolutionFailure(spec.command, {"executor": spec.executor})
    return [spec.executor, executable]


def build_argv(spec: CommandSpec, executable: Optional[str], extra_args: Sequence[str] = ()) -> List[str]:
    """
    Build the argument vector for ``spec``.

    Direct mode splits the raw command into words and ignores ``executable``.
    Executor mode runs ``executable`` with the executor.

    Raises:
        ResolutionFailure: If an executor is set but nothing was resolved
    """
    argv: List[str] = []
    for index, word in enumerate(_head(spec, executable)):
        # the resolved path stays one token
        argv.extend(shlex.split(word) if index == 0 else [word])
    argv.extend(spec.args)
    argv.extend(extra_args)
    return argv


def build_command_line(spec: CommandSpec, executable: Optional[str], extra_args: Sequence[str] = ()) -> str:
    """
    Build a shell command line for ``spec`` by joining tokens with single spaces.

    Tokens are not escaped: arguments with spaces, quotes or shell
    metacharacters are interpreted by the shell.

    Raises:
        ResolutionFailure: If an executor is set but nothing was resolved
    """
    tokens = [*_head(spec, executable), *spec.args, *extra_args]
    return " ".join(token for token in tokens if token)


def _decode(data: Optional[bytes]) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def invoke_command(
    spec: CommandSpec,
    executable: Optional[str],
    extra_args: Iterable[Any] = (),
    *,
    shell: bool = False,
) -> InvocationResult:
    """
    Run ``spec`` and wait for it to exit.

    Args:
        spec: Command to run
        executable: Path resolved for ``spec.command``, or None
        extra_args: Hook arguments, serialized and appended after ``spec.args``
        shell: Run a joined command line through the platform shell instead of
            an argument vector

    Returns:
        InvocationResult: Captured output of a successful run

    Raises:
        ResolutionFailure: If an executor is set but nothing was resolved. No
            process is started.
        SubprocessError: If the process cannot be started or exits non-zero
    """
    extras = serialize_arguments(extra_args)
    if shell:
        argv: Tuple[str, ...] = ()
        command_line = build_command_line(spec, executable, extras)
    else:
        argv = tuple(build_argv(spec, executable, extras))
        command_line = shlex.join(argv)

    log.debug("Running command: %s", command_line)
    start = time.perf_counter()
    try:
        if shell:
            process = await asyncio.create_subprocess_shell(
                command_line,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        else:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
    except (OSError, ValueError) as exc:
        raise SubprocessError(
            command_line, str(exc), argv=argv, duration=time.perf_counter() - start
        ) from exc

    stdout, stderr = await process.communicate()
    duration = time.perf_counter() - start
    log.debug("%s exited with %s after %f seconds", command_line, process.returncode, duration)

    if process.returncode != 0:
        raise SubprocessError(
            command_line,
            f"Command failed with exit code {process.returncode}",
            returncode=process.returncode,
            stderr=_decode(stderr),
            argv=argv,
            duration=duration,
        )

    return InvocationResult(
        spec=spec,
        executable=executable,
        command_line=command_line,
        argv=argv,
        returncode=process.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        duration=duration,
    )
