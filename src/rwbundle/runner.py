"""Synchronous subprocess wrapper used for every toolchain invocation."""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from rwbundle.output import debug, error, info


def merged_env(extra: Optional[Mapping[str, str]], base: Mapping[str, str]) -> dict[str, str]:
    """Overlay *extra* on a copy of *base* without touching either."""
    env = dict(base)
    if extra:
        env.update(extra)
    return env


def format_command(argv: Sequence[str]) -> str:
    """Render *argv* as a shell-quoted line for display only."""
    return shlex.join(argv)


def run_command(
    argv: Sequence[str],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> bool:
    """Run *argv* to completion with inherited stdout/stderr.

    The child gets a copy of the current environment with *env* laid over
    it; this process's own environment is left untouched. There is no
    timeout and no retry.

    Args:
        argv: Program and arguments.
        cwd: Working directory for the child, defaults to the current one.
        env: Extra environment variables for the child only.

    Returns:
        ``True`` if the command exited with status 0, ``False`` if it exited
        non-zero or could not be started.
    """
    info(f"Running: {format_command(argv)}")
    if cwd is not None:
        debug(f"  in {cwd}")
    for key, value in (env or {}).items():
        debug(f"  with {key}={value}")

    try:
        result = subprocess.run(
            list(argv),
            cwd=cwd,
            env=merged_env(env, os.environ),
        )
    except FileNotFoundError:
        error(f"Command not found: {argv[0]}")
        return False
    except OSError as exc:
        error(f"Could not start {argv[0]}: {exc}")
        return False

    if result.returncode != 0:
        error(f"Command failed with exit code {result.returncode}")
        return False
    return True
