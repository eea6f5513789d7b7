"""Logging setup for the command-line host."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

from inject_commands.utils import get_filename, path_from_root

LOGGER_NAME = "inject_commands"
LOG_DIR = Path(".cache", "logs")
LATEST_LOG_NAME = Path(".cache", "latest.log")
LOG_FORMAT = (
    "[%(asctime)s] [%(levelname)-8s] [%(filename)-16s] "
    "[%(funcName)-20s] [%(lineno)-4d] %(message)s"
)

# ANSI color codes for log levels
LOG_COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[41m",  # Red background
}
RESET_COLOR = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the whole line by log level."""

    def format(self, record):
        color = LOG_COLORS.get(record.levelname, "")
        return f"{color}{super().format(record)}{RESET_COLOR}"


class LogManager:
    """Singleton that configures the package logger once per process."""

    __instance: "LogManager | None" = None

    def __new__(cls, *args, **kwargs):
        if cls.__instance is None:
            cls.__instance = super().__new__(cls)
            cls.__instance._logger = None  # type: ignore[attr-defined]
        return cls.__instance

    def __init__(self, console_level: str = "INFO"):
        if getattr(self, "_logger", None) is None:
            self._logger = self._init_logger(console_level)
        else:
            self.set_console_level(console_level)

    @staticmethod
    def _init_logger(console_level: str) -> logging.Logger:
        """Configure console and file logging for the package logger."""

        log_file_path = Path(get_filename("Log_", ".log", LOG_DIR))
        logging.config.dictConfig(LogManager._build_logging_config(log_file_path, console_level))

        LogManager._create_latest_log_link(log_file_path)
        return logging.getLogger(LOGGER_NAME)

    @staticmethod
    def _build_logging_config(log_file_path: Path, console_level: str) -> Dict[str, Any]:
        """Return the logging configuration dictionary."""

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console_formatter": {
                    "()": ColoredFormatter,
                    "format": LOG_FORMAT,
                },
                "file_formatter": {
                    "format": LOG_FORMAT,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": console_level,
                    "formatter": "console_formatter",
                },
                "file": {
                    "class": "logging.FileHandler",
                    "filename": str(log_file_path),
                    "level": "DEBUG",
                    "mode": "w",
                    "formatter": "file_formatter",
                    "encoding": "utf8",
                    "delay": True,
                },
            },
            "loggers": {
                LOGGER_NAME: {
                    "handlers": ["console", "file"],
                    "level": "DEBUG",
                    "propagate": False,
                },
            },
        }

    @staticmethod
    def _create_latest_log_link(log_file_path: Path) -> None:
        """Create or refresh the ``latest.log`` symbolic link."""

        latest = Path(path_from_root(LATEST_LOG_NAME))
        try:
            latest.parent.mkdir(parents=True, exist_ok=True)

            if latest.exists() or latest.is_symlink():
                latest.unlink()

            latest.symlink_to(log_file_path)
        except OSError as exc:  # pragma: no cover - platform dependent
            logging.getLogger(LOGGER_NAME).warning("Failed to create log symlink: %s", exc)

    def set_console_level(self, level: str) -> None:
        for handler in self._logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def get_logger(self) -> logging.Logger:
        """Return the configured logger instance."""

        return self._logger
