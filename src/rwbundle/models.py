"""Canonical data shapes shared across rwbundle modules.

**Configuration models** (Pydantic v2) -- loaded from ``rwbundle.json`` and
merged with CLI flags and environment variables by :mod:`rwbundle.config`:
    :class:`DependencyPolicy`, :class:`LibraryBuildConfig`,
    :class:`LinkConfig`, and :class:`BundleConfig`.

**Build state** -- produced by the sequencer while a build runs:
    :class:`BuildStage`, :class:`BuildLayout`, and :class:`BuildResult`.

Defaults come from the static table in :mod:`rwbundle.toolchain`. Unknown
keys in the config file are rejected so that typos surface as
:class:`~rwbundle.exceptions.ConfigError` instead of being ignored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rwbundle import toolchain


# --- Configuration ---


class DependencyPolicy(str, enum.Enum):
    """How to treat the optional runtime dependency (the WebView2 loader).

    ``WARN`` logs a missing or uncopyable file and carries on. ``REQUIRE``
    fails the build when the file is absent or cannot be copied, for setups
    where the launcher cannot start without it.
    """

    WARN = "warn"
    REQUIRE = "require"


class LibraryBuildConfig(BaseModel):
    """First stage: the static library build, run inside the marker directory."""

    model_config = ConfigDict(extra="forbid")

    command: list[str] = Field(
        default_factory=lambda: list(toolchain.LIBRARY_BUILD_COMMAND),
        description="Build command as an argument list",
    )
    jobs: Optional[int] = Field(
        default=toolchain.LIBRARY_BUILD_JOBS,
        ge=1,
        description="Parallel job limit passed as '-j N'; null omits the flag",
    )
    env: dict[str, str] = Field(
        default_factory=lambda: dict(toolchain.STATIC_RUNTIME_ENV),
        description="Extra environment for the build process only",
    )

    @field_validator("command")
    @classmethod
    def _command_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("command must name at least the program to run")
        return value


class LinkConfig(BaseModel):
    """Final stage: compiling and linking the launcher executable."""

    model_config = ConfigDict(extra="forbid")

    compiler: list[str] = Field(
        default_factory=lambda: list(toolchain.COMPILER_COMMAND),
        description="Compiler driver and its leading flags",
    )
    entry_point: str = Field(
        default=toolchain.ENTRY_POINT,
        description="Launcher source file, relative to the project root",
    )
    output_name: str = Field(
        default=toolchain.OUTPUT_NAME,
        description="Executable written to the project root",
    )
    system_libraries: list[str] = Field(
        default_factory=lambda: list(toolchain.SYSTEM_LIBRARIES),
    )

    @field_validator("compiler")
    @classmethod
    def _compiler_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("compiler must name at least the program to run")
        return value


class BundleConfig(BaseModel):
    """Effective configuration for one orchestrated build.

    Example ``rwbundle.json``::

        {
            "dependency_policy": "require",
            "library": {"jobs": 4},
            "link": {"output_name": "Browser-dev.exe"}
        }
    """

    model_config = ConfigDict(extra="forbid")

    marker: str = Field(
        default=toolchain.MARKER_DIR,
        description="Directory whose presence identifies the project root",
    )
    release_dir: str = Field(
        default=toolchain.RELEASE_DIR,
        description="Release output directory, relative to the marker directory",
    )
    artifact_name: str = Field(default=toolchain.ARTIFACT_NAME)
    dependency_name: Optional[str] = Field(
        default=toolchain.DEPENDENCY_NAME,
        description="Runtime file copied next to the executable; null disables the copy",
    )
    dependency_policy: DependencyPolicy = DependencyPolicy.WARN
    library: LibraryBuildConfig = Field(default_factory=LibraryBuildConfig)
    link: LinkConfig = Field(default_factory=LinkConfig)


# --- Build state ---


class BuildStage(str, enum.Enum):
    """States of the build sequence, in order, plus the terminal ``FAILED``."""

    LOCATING_ROOT = "locating_root"
    BUILDING_LIBRARY = "building_library"
    VERIFYING_ARTIFACT = "verifying_artifact"
    COPYING_DEPENDENCY = "copying_dependency"
    COMPILING_EXECUTABLE = "compiling_executable"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildLayout:
    """Every path the build touches, derived from the located root."""

    root: Path
    marker_dir: Path
    release_dir: Path
    artifact: Path
    dependency_source: Optional[Path]
    dependency_target: Optional[Path]
    entry_point: Path
    output: Path

    @classmethod
    def from_root(cls, root: Path, config: BundleConfig) -> BuildLayout:
        marker_dir = root / config.marker
        release_dir = marker_dir / config.release_dir
        dep = config.dependency_name
        return cls(
            root=root,
            marker_dir=marker_dir,
            release_dir=release_dir,
            artifact=release_dir / config.artifact_name,
            dependency_source=release_dir / dep if dep else None,
            dependency_target=root / dep if dep else None,
            entry_point=root / config.link.entry_point,
            output=root / config.link.output_name,
        )


@dataclass
class BuildResult:
    """Outcome of a completed (or dry-run) build."""

    stage: BuildStage
    layout: BuildLayout
    dependency_copied: bool = False
    dry_run: bool = False
