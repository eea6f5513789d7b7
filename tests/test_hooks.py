"""Behavioural tests for the hook table and hook command execution."""

from __future__ import annotations

import asyncio
import json
import shlex
import sys
from typing import Any, List
from unittest.mock import patch

import pytest

from inject_commands.config import CommandSpec
from inject_commands.errors import ResolutionFailure, SubprocessError
from inject_commands.hooks import (
    HookRegistry,
    HookType,
    allowed_hook_names,
    collect_extra_arguments,
    execute_commands,
    hook_name,
)

ECHO_ARGS_SCRIPT = "import json, sys\nprint(json.dumps(sys.argv[1:]))\n"
PYTHON = shlex.quote(sys.executable)


@pytest.fixture
def scripts_dir(tmp_path):
    """A search directory with one script that echoes its arguments."""
    scripts = tmp_path / "scripts"
    (scripts / "nested").mkdir(parents=True)
    (scripts / "nested" / "echo_args.py").write_text(ECHO_ARGS_SCRIPT, encoding="utf-8")
    return scripts


class TestHookRegistry:
    """Test cases for the handler table."""

    @staticmethod
    async def _handler(*args: Any) -> List[Any]:
        return list(args)

    def test_get_handler_by_name_or_enum(self):
        """Handlers are found by string name and by HookType."""
        registry = HookRegistry({"buildStart": self._handler})
        assert registry.get_handler("buildStart") is self._handler
        assert registry.get_handler(HookType.BUILD_START) is self._handler
        assert HookType.BUILD_START in registry
        assert "buildEnd" not in registry
        assert 3 not in registry

    def test_unknown_handler(self):
        """Looking up an unregistered hook raises KeyError."""
        registry = HookRegistry({})
        with pytest.raises(KeyError, match="buildEnd"):
            registry.get_handler(HookType.BUILD_END)

    def test_handlers_are_read_only(self):
        """The table cannot be changed after construction."""
        source = {"buildStart": self._handler}
        registry = HookRegistry(source)
        source["buildEnd"] = self._handler

        assert registry.names() == ("buildStart",)
        assert len(registry) == 1
        assert list(registry) == ["buildStart"]
        with pytest.raises(TypeError):
            registry.handlers["buildEnd"] = self._handler  # type: ignore[index]

    def test_hook_names(self):
        """HookType values are the host's hook names."""
        assert hook_name(HookType.CONFIG_RESOLVED) == "configResolved"
        assert hook_name("custom") == "custom"
        names = allowed_hook_names(["deploy"])
        assert {"buildStart", "closeBundle", "pre_build", "deploy"} <= names


class TestCollectExtraArguments:
    """Test cases for collect_extra_arguments."""

    def test_config_goes_last(self):
        """The captured configuration follows the hook arguments."""
        config = {"mode": "production"}
        assert collect_extra_arguments(("dev", 1), config) == ["dev", 1, config]

    def test_without_config(self):
        """No configuration means no extra value."""
        assert collect_extra_arguments(("dev",), None) == ["dev"]

    def test_forwarding_disabled(self):
        """forward_config=False leaves the hook arguments alone."""
        assert collect_extra_arguments(("dev",), {"a": 1}, forward_config=False) == ["dev"]

    def test_config_already_in_hook_args(self):
        """The same configuration object is not appended twice."""
        config = {"mode": "production"}
        assert collect_extra_arguments((config,), config) == [config]

    def test_equal_but_distinct_config_is_appended(self):
        """Only identity suppresses the configuration."""
        assert collect_extra_arguments(({"a": 1},), {"a": 1}) == [{"a": 1}, {"a": 1}]


class TestExecuteCommands:
    """Test cases for execute_commands."""

    def test_failure_does_not_stop_later_commands(self, scripts_dir):
        """A failing command is recorded and the next one still runs."""
        commands = [
            CommandSpec(command="sh", args=["-c", "exit 1"]),
            CommandSpec(command="echo_args.py", executor=PYTHON, args=["second"]),
        ]

        results = asyncio.run(execute_commands(commands, [str(scripts_dir)]))

        assert len(results) == 2
        assert isinstance(results[0].error, SubprocessError)
        assert results[0].returncode == 1
        assert results[0].argv == ("sh", "-c", "exit 1")
        assert results[0].duration > 0
        assert results[1].success
        assert json.loads(results[1].stdout) == ["second"]

    @pytest.mark.parametrize("shell", [False, True])
    def test_unspawnable_argument_does_not_stop_later_commands(self, scripts_dir, shell):
        """An argument the OS cannot pass is a per-command failure, not an exception."""
        commands = [
            CommandSpec(command="echo", args=["first"]),
            CommandSpec(command="echo_args.py", executor=PYTHON, args=["second"]),
        ]

        results = asyncio.run(
            execute_commands(commands, [str(scripts_dir)], ["code\x00with nul"], shell=shell)
        )

        assert len(results) == 2
        for result in results:
            assert isinstance(result.error, SubprocessError)
            assert result.returncode is None
            assert "null" in result.error.message

    def test_unresolved_command_does_not_stop_later_commands(self, scripts_dir):
        """A resolution failure is recorded and the next command still runs."""
        commands = [
            CommandSpec(command="missing.py", executor=PYTHON),
            CommandSpec(command="echo", args=["after"]),
        ]

        results = asyncio.run(execute_commands(commands, [str(scripts_dir)]))

        assert isinstance(results[0].error, ResolutionFailure)
        assert results[0].executable is None
        assert results[0].command_line == ""
        assert results[1].stdout == "after\n"

    def test_commands_run_in_declaration_order(self, scripts_dir, tmp_path):
        """Each command finishes before the next one starts."""
        log_file = tmp_path / "order.log"
        commands = [
            CommandSpec(command="sh", args=["-c", f"sleep 0.2; echo first >> {shlex.quote(str(log_file))}"]),
            CommandSpec(command="sh", args=["-c", f"echo second >> {shlex.quote(str(log_file))}"]),
        ]

        asyncio.run(execute_commands(commands, [str(scripts_dir)]))

        assert log_file.read_text(encoding="utf-8") == "first\nsecond\n"

    def test_hook_args_and_config_are_forwarded(self, scripts_dir):
        """Hook arguments and the configuration reach the script serialized."""
        commands = [CommandSpec(command="nested/echo_args.py", executor=PYTHON, args=["--flag"])]

        results = asyncio.run(
            execute_commands(commands, [str(scripts_dir)], ("dev", {"port": 3000}), {"mode": "production"})
        )

        assert json.loads(results[0].stdout) == ["--flag", "dev", '{"port":3000}', '{"mode":"production"}']
        assert results[0].executable == str(scripts_dir / "nested" / "echo_args.py")

    def test_shell_mode(self, scripts_dir):
        """shell=True runs the joined command line."""
        commands = [CommandSpec(command="echo", args=["$((1 + 2))"])]

        results = asyncio.run(execute_commands(commands, [str(scripts_dir)], shell=True))

        assert results[0].command_line == "echo $((1 + 2))"
        assert results[0].stdout == "3\n"

    def test_unreadable_directory_aborts_before_any_command(self, tmp_path):
        """A directory read failure propagates and nothing is started."""
        commands = [CommandSpec(command="echo", args=["never"])]

        with patch("inject_commands.invoker.asyncio.create_subprocess_exec") as mock_exec:
            with pytest.raises(OSError):
                asyncio.run(execute_commands(commands, [str(tmp_path / "missing")]))

        mock_exec.assert_not_called()

    def test_directories_are_searched_on_every_call(self, scripts_dir):
        """Scripts added between firings are found without caching."""
        commands = [CommandSpec(command="late.py", executor=PYTHON)]

        first = asyncio.run(execute_commands(commands, [str(scripts_dir)]))
        (scripts_dir / "late.py").write_text("print('late')\n", encoding="utf-8")
        second = asyncio.run(execute_commands(commands, [str(scripts_dir)]))

        assert isinstance(first[0].error, ResolutionFailure)
        assert second[0].stdout == "late\n"

    def test_logs_stdout_and_errors(self, scripts_dir, caplog):
        """stdout is logged on success, the error and stderr on failure."""
        caplog.set_level("INFO", logger="inject_commands")
        commands = [
            CommandSpec(command="echo", args=["visible"]),
            CommandSpec(command="sh", args=["-c", "echo broken >&2; exit 2"]),
        ]

        asyncio.run(execute_commands(commands, [str(scripts_dir)]))

        messages = [(record.levelname, record.getMessage()) for record in caplog.records]
        assert ("INFO", "visible\n") in messages
        assert any(level == "ERROR" and "broken" in message for level, message in messages)
