"""Shared test fixtures for rwbundle.

Provides an isolated project tree (root with the marker directory), stub
toolchain commands built from the running Python interpreter, and output
state management. Fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

from rwbundle.models import BundleConfig, LibraryBuildConfig, LinkConfig
from rwbundle.output import OutputFormat, OutputManager, reset_output, set_output


# Writes the release artifact relative to the marker directory (its cwd).
BUILD_STUB = (
    "import pathlib; "
    "p = pathlib.Path('target', 'release'); "
    "p.mkdir(parents=True, exist_ok=True); "
    "(p / 'rusty_web_core.lib').write_bytes(b'lib')"
)

# Succeeds without producing anything.
NOOP_STUB = "pass"

FAIL_STUB = "import sys; sys.exit(3)"

# Writes the file named by the /Fe: argument, relative to the root (its cwd).
LINK_STUB = (
    "import pathlib, sys; "
    "out = next(a[4:] for a in sys.argv[1:] if a.startswith('/Fe:')); "
    "pathlib.Path(out).write_bytes(b'exe')"
)


def python_command(script: str) -> list[str]:
    """Argument vector running *script* with the current interpreter."""
    return [sys.executable, "-c", script]


def stub_config(
    build: str = BUILD_STUB,
    link: str = LINK_STUB,
    **overrides: Any,
) -> BundleConfig:
    """A BundleConfig whose toolchains are Python one-liners."""
    return BundleConfig(
        library=LibraryBuildConfig(command=python_command(build)),
        link=LinkConfig(compiler=python_command(link)),
        **overrides,
    )


def write_config(path: Path, config: BundleConfig) -> Path:
    """Serialise *config* to *path* as an rwbundle.json file."""
    path.write_text(json.dumps(config.model_dump(mode="json"), indent=2), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; resetting avoids writing into a stream closed by an
    earlier CliRunner invocation.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable colour and drop RWBUNDLE_* variables from the environment."""
    monkeypatch.setenv("NO_COLOR", "1")
    for var in ["RWBUNDLE_CONFIG", "RWBUNDLE_DEPENDENCY_POLICY"]:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Project tree fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project root containing the marker directory; cwd is the root.

    Returns:
        The project root.
    """
    root = tmp_path / "project"
    (root / "rusty_web_core").mkdir(parents=True)
    (root / "packager").mkdir()
    (root / "packager" / "main.cpp").write_text("int main() { return 0; }\n")
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def release_dir(project: Path) -> Path:
    """The release output directory, pre-created."""
    path = project / "rusty_web_core" / "target" / "release"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_DATA_HOME at a temporary directory."""
    path = tmp_path / "data"
    monkeypatch.setenv("XDG_DATA_HOME", str(path))
    monkeypatch.setattr("rwbundle.config._is_xdg_platform", lambda: True)
    return path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Stub toolchain fixtures
# ---------------------------------------------------------------------------


STUBS = {"build": BUILD_STUB, "noop": NOOP_STUB, "fail": FAIL_STUB, "link": LINK_STUB}


@pytest.fixture
def make_config():
    """Factory for stub-toolchain configs.

    ``make_config(build="noop", link="fail", dependency_policy="require")``
    picks scripts by name from :data:`STUBS`; other keyword arguments are
    passed to :class:`BundleConfig`.
    """

    def _make(build: str = "build", link: str = "link", **overrides: Any) -> BundleConfig:
        return stub_config(STUBS[build], STUBS[link], **overrides)

    return _make


@pytest.fixture
def project_config(project: Path, make_config):
    """Write a stub-toolchain ``rwbundle.json`` into the project root."""

    def _write(**kwargs: Any) -> Path:
        return write_config(project / "rwbundle.json", make_config(**kwargs))

    return _write
