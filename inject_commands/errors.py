"""Exceptions raised while configuring the plugin and running injected commands."""

from __future__ import annotations

from typing import Optional, Tuple


class InjectCommandsError(Exception):
    """Base exception for inject-commands errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(InjectCommandsError):
    """Exception raised for invalid or missing plugin options."""

    pass


class ResolutionFailure(InjectCommandsError):
    """Exception raised when an executor-mode command matches no discovered file."""

    def __init__(self, command: str, details: Optional[dict] = None):
        super().__init__(f"Command {command} not found.", details)
        self.command = command


class SubprocessError(InjectCommandsError):
    """Exception raised when a command exits non-zero or cannot be spawned."""

    def __init__(
        self,
        command_line: str,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
        argv: Tuple[str, ...] = (),
        duration: float = 0.0,
    ):
        super().__init__(
            f"Error: {message}, stderr: {stderr}",
            {"command_line": command_line, "returncode": returncode},
        )
        self.command_line = command_line
        self.returncode = returncode
        self.stderr = stderr
        self.argv = argv
        self.duration = duration


__all__ = [
    "InjectCommandsError",
    "ConfigurationError",
    "ResolutionFailure",
    "SubprocessError",
]
