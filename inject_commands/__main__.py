"""
Main entry point for running the inject_commands package as a module.
"""

import argparse
import inspect
import json
import os
import sys
from importlib import import_module
from typing import Any, Dict, List, Optional

from inject_commands.config import load_options
from inject_commands.errors import ConfigurationError
from inject_commands.log_manager import LogManager
from inject_commands.operations.registry import OperationMetadata, get_registered_operations
from inject_commands.plugin import InjectCommandsPlugin
from inject_commands.utils import get_version

# Ensure operations are registered by importing modules that use @register
import_module("inject_commands.operations.commands")


def _operations_help(operations: Dict[str, OperationMetadata]) -> str:
    labels = {op: f"{op} {meta.usage}".rstrip() for op, meta in operations.items()}
    width = max((len(label) for label in labels.values()), default=0) + 2
    lines = ["operations:"]
    for op, meta in operations.items():
        lines.append(f"  {labels[op]:<{width}}{meta.desc}")
    return "\n".join(lines)


def _build_parser(operations: Dict[str, OperationMetadata]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inject-commands",
        description="Run external scripts at build lifecycle hooks.",
        epilog=_operations_help(operations),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    parser.add_argument(
        "-c",
        "--config",
        help="TOML options file (default: inject-commands.toml or [tool.inject-commands] in pyproject.toml)",
    )
    parser.add_argument(
        "--build-config",
        help="JSON file delivered to the plugin as the resolved build configuration",
    )
    parser.add_argument(
        "--json-args",
        action="store_true",
        help="Decode each hook argument as JSON, keeping it as a string when it is not JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console")
    parser.add_argument("operate", choices=list(operations), metavar="operation", help="Operation to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Operation arguments")
    return parser


def _load_build_config(path: Optional[str]) -> Any:
    if path is None:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in build config: {path}", {"error": str(exc)}) from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read build config: {path}", {"error": str(exc)}) from exc


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the inject-commands CLI."""
    operations = get_registered_operations()
    parser = _build_parser(operations)
    parsed = parser.parse_args(argv)

    log = LogManager("DEBUG" if parsed.verbose else "INFO").get_logger()
    log.debug("argv: %s", sys.argv if argv is None else argv)

    try:
        options = load_options(parsed.config)
        plugin = InjectCommandsPlugin(options)
        build_config = _load_build_config(parsed.build_config)
    except ConfigurationError as exc:
        log.error("%s", exc.message)
        if exc.details:
            log.debug("details: %s", exc.details)
        return 1

    env = {
        "root_path": os.getcwd(),
        "config_path": parsed.config,
        "build_config": build_config,
        "json_args": parsed.json_args,
    }

    meta = operations[parsed.operate]
    sig = inspect.signature(meta.func)
    try:
        sig.bind(env, plugin, *parsed.args)
    except TypeError:
        log.error("Usage: %s %s", parsed.operate, meta.usage or "(no arguments)")
        return 1

    result = meta.func(env, plugin, *parsed.args)
    if result is False:
        log.error("Operation '%s' failed", parsed.operate)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
