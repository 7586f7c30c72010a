"""Configuration loading and precedence resolution.

* **Project config** -- an optional ``rwbundle.json`` deserialised into a
  :class:`~rwbundle.models.BundleConfig`. See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the project file, and the built-in toolchain
  defaults into the effective configuration.
* **Data directory** -- :func:`get_data_dir` is XDG compliant on Linux/BSD
  and falls back to ``~/.rwbundle/`` elsewhere; crash logs live there.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from rwbundle import toolchain
from rwbundle.exceptions import ConfigError
from rwbundle.models import BundleConfig, DependencyPolicy
from rwbundle.output import debug

_APP_NAME = "rwbundle"
PROJECT_CONFIG_FILENAME = "rwbundle.json"

ENV_CONFIG = "RWBUNDLE_CONFIG"
ENV_DEPENDENCY_POLICY = "RWBUNDLE_DEPENDENCY_POLICY"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/rwbundle/`` (default ``~/.local/share/rwbundle/``).
    On macOS/Windows: ``~/.rwbundle/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project config ---


def find_project_config(
    start: Optional[Path] = None,
    marker: str = toolchain.MARKER_DIR,
) -> Optional[Path]:
    """Return the implicit project config path, or ``None``.

    Looks for ``rwbundle.json`` in *start* (default: the current directory).
    The parent is only searched when *start* is not itself the project root
    (has no *marker* directory), so a file above the project is never used.
    """
    start = start or Path.cwd()
    candidates = [start / PROJECT_CONFIG_FILENAME]
    if not (start / marker).is_dir():
        candidates.append(start.parent / PROJECT_CONFIG_FILENAME)
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_project_config(path: Path) -> dict[str, Any]:
    """Read a project config file as a raw dict.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid JSON, or
            not a JSON object.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_config: Optional[str] = None,
    cli_strict_dependency: bool = False,
) -> tuple[BundleConfig, Optional[Path]]:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--config``, ``--strict-dependency``)
        2. Environment variables (``RWBUNDLE_CONFIG``,
           ``RWBUNDLE_DEPENDENCY_POLICY``)
        3. Project config (``./rwbundle.json``, or ``../rwbundle.json`` when
           the current directory is not the project root)
        4. Built-in toolchain defaults

    Returns:
        A tuple of ``(config, config_file_or_None)``.

    Raises:
        ConfigError: If an explicitly named config file does not exist, any
            config file is malformed, or a value fails validation.
    """
    # 3. Locate the project file (an explicit path must exist)
    explicit = cli_config or os.environ.get(ENV_CONFIG) or None
    config_path: Optional[Path]
    if explicit:
        config_path = Path(explicit).expanduser()
        data = load_project_config(config_path)
    else:
        config_path = find_project_config()
        data = load_project_config(config_path) if config_path else {}
    if config_path is not None:
        debug(f"Using config file {config_path}")

    # 2. Environment variable
    env_policy = os.environ.get(ENV_DEPENDENCY_POLICY)
    if env_policy:
        data["dependency_policy"] = env_policy

    # 1. CLI flag (highest precedence)
    if cli_strict_dependency:
        data["dependency_policy"] = DependencyPolicy.REQUIRE.value

    try:
        config = BundleConfig.model_validate(data)
    except ValidationError as exc:
        source = config_path or "environment"
        raise ConfigError(f"Invalid configuration ({source}): {exc}") from exc
    return config, config_path
