"""Root location and existence checks.

The bundler may be started either from the project root or from its own
subdirectory one level below; :func:`locate_root` normalises both cases so
that every later path is built relative to the root.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from rwbundle.exceptions import RootNotFoundError
from rwbundle.output import debug, info

PathLike = Union[str, os.PathLike]


def dir_exists(path: PathLike) -> bool:
    """Return True if *path* is an existing directory. Never raises."""
    try:
        return Path(path).is_dir()
    except OSError:
        return False


def file_exists(path: PathLike) -> bool:
    """Return True if *path* exists and is not a directory. Never raises."""
    try:
        p = Path(path)
        return p.exists() and not p.is_dir()
    except OSError:
        return False


def locate_root(marker: str) -> Path:
    """Find the directory that has *marker* as an immediate child.

    Checks the current directory first, then its parent. When the marker is
    only found in the parent, the process working directory is changed to
    the parent before returning, so later relative paths resolve from the
    root.

    Args:
        marker: Name of the directory identifying the project root.

    Returns:
        Absolute path to the root.

    Raises:
        RootNotFoundError: If the marker is in neither location.
    """
    cwd = Path.cwd()
    debug(f"Looking for '{marker}' under {cwd}")
    if dir_exists(cwd / marker):
        return cwd

    if dir_exists(cwd.parent / marker):
        os.chdir(cwd.parent)
        root = Path.cwd()
        info(f"Changed working directory to root: {root}")
        return root

    raise RootNotFoundError(marker)
