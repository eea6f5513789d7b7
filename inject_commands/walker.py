"""Recursive discovery of executable scripts under search directories."""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from typing import Iterable, List, Optional, Tuple

log = logging.getLogger(__name__)


def read_directory(directory: str) -> List[Tuple[str, bool]]:
    """
    Read a directory and return the absolute path of each entry with a directory flag.

    Entries keep the filesystem listing order. Symlinks are followed, so a
    dangling link raises like an unreadable directory does.

    Raises:
        OSError: If the directory or one of its entries cannot be read
    """
    entries: List[Tuple[str, bool]] = []
    with os.scandir(directory) as scanner:
        for entry in scanner:
            path = os.path.abspath(entry.path)
            entries.append((path, stat.S_ISDIR(os.stat(path).st_mode)))
    return entries


async def find_executables(
    directories: Iterable[str],
    extension: str = ".py",
    found: Optional[List[str]] = None,
) -> List[str]:
    """
    Recursively search directories for files ending in ``extension``.

    Args:
        directories: Directories to search, walked in the given order
        extension: Extension a file must have to be collected, e.g. ``.py``
        found: Optional list to accumulate results into

    Returns:
        Absolute paths of the matching files in walk order

    Raises:
        OSError: If a directory cannot be read. Nothing is returned in that case.
    """
    file_list: List[str] = [] if found is None else found

    for directory in directories:
        entries = await asyncio.to_thread(read_directory, directory)
        for path, is_dir in entries:
            if is_dir:
                await find_executables([path], extension, file_list)
            elif os.path.splitext(path)[1] == extension:
                file_list.append(path)

    if found is None:
        log.debug("Found %d '%s' executables", len(file_list), extension)
    return file_list
