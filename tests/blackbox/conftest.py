"""Blackbox test fixtures and helpers."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(
    args: List[str], cwd: Path, env: Dict[str, str] | None = None, check: bool = False
) -> subprocess.CompletedProcess:
    merged_env = os.environ.copy()
    merged_env["PYTHONPATH"] = str(REPO_ROOT)
    if env:
        merged_env.update(env)
    return subprocess.run(
        [os.environ.get("PYTHON", sys.executable), "-m", "inject_commands", *args],
        cwd=str(cwd),
        env=merged_env,
        text=True,
        capture_output=True,
        check=check,
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A project directory with scripts in two search roots."""
    (tmp_path / "scripts" / "release").mkdir(parents=True)
    (tmp_path / "tools").mkdir()
    (tmp_path / "scripts" / "release" / "stamp.py").write_text(
        "import json, sys\n"
        "with open('stamp.json', 'w', encoding='utf-8') as fh:\n"
        "    json.dump(sys.argv[1:], fh)\n"
        "print('stamped')\n",
        encoding="utf-8",
    )
    (tmp_path / "tools" / "fail.py").write_text(
        "import sys\nsys.stderr.write('tool failed\\n')\nsys.exit(2)\n", encoding="utf-8"
    )
    (tmp_path / "tools" / "README.txt").write_text("not a script\n", encoding="utf-8")
    return tmp_path
