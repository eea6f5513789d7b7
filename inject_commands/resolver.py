"""Match configured command names against discovered executables."""

from __future__ import annotations

from typing import Iterable, Optional


def resolve_command(found_executables: Iterable[str], command: str) -> Optional[str]:
    """
    Return the first discovered path ending with ``command``.

    This is a plain suffix match, not a path-segment match: ``"build.py"`` also
    matches ``/scripts/prebuild.py``. When several files match, walk order
    decides.

    Returns:
        The matching path, or None if nothing matches
    """
    for executable in found_executables:
        if executable.endswith(command):
            return executable
    return None
