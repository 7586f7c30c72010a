"""The build state machine.

:class:`BuildSequencer` walks the stages in :class:`~rwbundle.models.BuildStage`
order, stopping at the first failure::

    LOCATING_ROOT -> BUILDING_LIBRARY -> VERIFYING_ARTIFACT
        -> COPYING_DEPENDENCY -> COMPILING_EXECUTABLE -> DONE

Required-step failures raise a :class:`~rwbundle.exceptions.BundlerError`
subclass after moving :attr:`BuildSequencer.stage` to ``FAILED``; the CLI
turns that into exit status 1. Nothing is rolled back, so a built library
survives a failed link.
"""

from __future__ import annotations

import shlex
import shutil
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from rwbundle import toolchain
from rwbundle.exceptions import (
    BundlerError,
    CommandFailedError,
    DependencyError,
    MissingArtifactError,
)
from rwbundle.models import (
    BuildLayout,
    BuildResult,
    BuildStage,
    BundleConfig,
    DependencyPolicy,
)
from rwbundle.output import banner, debug, info, step, success, warning
from rwbundle.paths import dir_exists, file_exists, locate_root
from rwbundle.runner import format_command, run_command

CommandRunner = Callable[[Sequence[str], Optional[Path], Optional[Mapping[str, str]]], bool]

TITLE = "Rusty-Web Bundler"


class BuildSequencer:
    """Run one orchestrated build.

    Args:
        config: Effective bundle configuration.
        dry_run: Locate the root and print the planned commands without
            running them or touching any files.
        runner: Command runner, :func:`~rwbundle.runner.run_command` unless
            a test substitutes its own.
    """

    def __init__(
        self,
        config: BundleConfig,
        dry_run: bool = False,
        runner: CommandRunner = run_command,
    ) -> None:
        self.config = config
        self.dry_run = dry_run
        self._run = runner
        self.stage = BuildStage.LOCATING_ROOT
        self.layout: Optional[BuildLayout] = None

    def run(self) -> BuildResult:
        """Execute every stage and return the result.

        Raises:
            BundlerError: From whichever stage failed; :attr:`stage` is
                ``FAILED`` afterwards.
        """
        banner(TITLE)
        try:
            layout = self._locate()
            if self.dry_run:
                return self._plan(layout)
            self._build_library(layout)
            self._verify_artifact(layout)
            copied = self._copy_dependency(layout)
            self._compile_executable(layout)
        except BundlerError:
            self.stage = BuildStage.FAILED
            raise

        self.stage = BuildStage.DONE
        banner("Build SUCCESS!", f"Output: {layout.output}")
        return BuildResult(stage=self.stage, layout=layout, dependency_copied=copied)

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #

    def _locate(self) -> BuildLayout:
        self.stage = BuildStage.LOCATING_ROOT
        root = locate_root(self.config.marker)
        self.layout = BuildLayout.from_root(root, self.config)
        debug(f"Project root: {root}")
        return self.layout

    def _build_library(self, layout: BuildLayout) -> None:
        self.stage = BuildStage.BUILDING_LIBRARY
        step("[Step 1/3] Building Rust core (static lib)...")
        argv = toolchain.library_build_argv(self.config)
        env = toolchain.library_build_env(self.config)
        if not self._run(argv, layout.marker_dir, env):
            raise CommandFailedError("Library build failed.")

    def _verify_artifact(self, layout: BuildLayout) -> None:
        self.stage = BuildStage.VERIFYING_ARTIFACT
        step("[Step 2/3] Verifying artifacts...")
        if not file_exists(layout.artifact):
            raise MissingArtifactError(layout.artifact)
        debug(f"Found {layout.artifact}")

    def _copy_dependency(self, layout: BuildLayout) -> bool:
        """Copy the runtime dependency next to the executable.

        Returns:
            ``True`` if the file was copied. Under the ``warn`` policy a
            missing or uncopyable file returns ``False``; under ``require``
            it raises :class:`DependencyError`.
        """
        self.stage = BuildStage.COPYING_DEPENDENCY
        source, target = layout.dependency_source, layout.dependency_target
        if source is None or target is None:
            return False
        strict = self.config.dependency_policy == DependencyPolicy.REQUIRE
        name = source.name

        if not file_exists(source):
            if strict:
                raise DependencyError(f"Required dependency {source} is missing.", source)
            debug(f"No {name} in {source.parent}, skipping copy")
            return False

        info(f"Copying {name} to output directory...")
        try:
            if dir_exists(target):
                raise IsADirectoryError(f"{target} is a directory")
            shutil.copy2(source, target)
        except OSError as exc:
            if strict:
                raise DependencyError(f"Failed to copy {name}: {exc}", source) from exc
            warning(f"Failed to copy {name}: {exc}")
            return False
        info(f"Success copying {name}.")
        return True

    def _compile_executable(self, layout: BuildLayout) -> None:
        self.stage = BuildStage.COMPILING_EXECUTABLE
        step("[Step 3/3] Compiling C++ launcher...")
        argv = toolchain.link_argv(self.config, layout)
        if not self._run(argv, layout.root, None):
            raise CommandFailedError("C++ compilation failed.")

    # ------------------------------------------------------------------ #
    # Dry run
    # ------------------------------------------------------------------ #

    def _plan(self, layout: BuildLayout) -> BuildResult:
        env = toolchain.library_build_env(self.config)
        prefix = " ".join(f"{k}={shlex.quote(v)}" for k, v in env.items())
        library_cmd = format_command(toolchain.library_build_argv(self.config))

        step("[Step 1/3] Would build Rust core (static lib):")
        info(f"  (in {layout.marker_dir})")
        info(f"  {prefix} {library_cmd}" if prefix else f"  {library_cmd}")
        step("[Step 2/3] Would verify artifacts:")
        info(f"  {layout.artifact}")
        if layout.dependency_source is not None:
            info(f"  copy {layout.dependency_source} -> {layout.dependency_target}")
        step("[Step 3/3] Would compile C++ launcher:")
        info(f"  (in {layout.root})")
        info(f"  {format_command(toolchain.link_argv(self.config, layout))}")

        self.stage = BuildStage.DONE
        success("Dry run complete, nothing was executed.")
        return BuildResult(stage=self.stage, layout=layout, dry_run=True)
