"""Utility helpers shared across the project."""

from __future__ import annotations

import os
import time
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Union

PathLike = Union[str, os.PathLike]

DISTRIBUTION_NAME = "inject-commands"


def path_from_root(*parts: PathLike) -> str:
    """Join ``parts`` to the current working directory and return the path as ``str``.

    An absolute part replaces everything accumulated before it, as with
    :meth:`pathlib.Path.joinpath`.
    """

    cwd = Path.cwd()
    if not parts:
        return str(cwd)
    return str(cwd.joinpath(*(Path(p) for p in parts)))


def get_filename(prefix: str, suffix: str, directory: PathLike) -> str:
    """Return a timestamped filename under ``directory``, creating the directory."""

    target_dir = Path(path_from_root(directory))
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = time.strftime("%Y%m%d_%H%M%S")
    return str(target_dir / f"{prefix}{timestamp}{suffix}")


def get_version() -> str:
    """
    Return the installed package version.

    Returns:
        str: The version, or "0.0.0-dev" when running from an uninstalled checkout.
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.0.0-dev"
