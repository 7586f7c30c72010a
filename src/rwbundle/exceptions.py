"""Exception hierarchy for rwbundle.

All exceptions inherit from :class:`BundlerError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`rwbundle.exit_codes`.
The top-level handler in :func:`rwbundle.app.main` catches ``BundlerError``,
prints the message to stderr and exits with the error's code. Unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    BundlerError (exit 1)
    +-- RootNotFoundError     (exit 1)
    +-- CommandFailedError    (exit 1)
    +-- MissingArtifactError  (exit 1)
    +-- DependencyError       (exit 1)
    +-- ConfigError           (exit 1)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rwbundle.exit_codes import EXIT_GENERIC_FAILURE


class BundlerError(Exception):
    """Base exception for all rwbundle errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class RootNotFoundError(BundlerError):
    """Raised when the marker directory is found in neither the cwd nor its parent."""

    def __init__(self, marker: str):
        super().__init__(
            f"Could not find '{marker}'. Make sure you run this from the "
            "project root or bundler directory."
        )
        self.marker = marker


class CommandFailedError(BundlerError):
    """Raised when a required toolchain command exits non-zero or cannot start."""


class MissingArtifactError(BundlerError):
    """Raised when the library build reported success but produced no artifact."""

    def __init__(self, artifact: Path):
        super().__init__(f"{artifact} is missing. Build likely failed.")
        self.artifact = artifact


class DependencyError(BundlerError):
    """Raised for runtime dependency problems under the ``require`` policy.

    Under the default ``warn`` policy the same conditions are only logged.
    """

    def __init__(self, message: str, dependency: Optional[Path] = None):
        super().__init__(message)
        self.dependency = dependency


class ConfigError(BundlerError):
    """Raised for configuration problems (missing file, invalid JSON, failed validation)."""
