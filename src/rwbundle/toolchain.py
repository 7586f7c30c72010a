"""Static toolchain table and argument-vector construction.

The defaults below describe the Windows/MSVC + Rust toolchain pair the
bundle is built with. They seed the :mod:`rwbundle.models` defaults and can
be overridden per project through ``rwbundle.json``; nothing else in the
package hard-codes a tool name, flag, or library.

Commands are always returned as argument lists. Quoting is left to
:mod:`subprocess`, so paths containing spaces need no special handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rwbundle.models import BuildLayout, BundleConfig


# --- Project layout ---

MARKER_DIR = "rusty_web_core"
RELEASE_DIR = "target/release"
ARTIFACT_NAME = "rusty_web_core.lib"
DEPENDENCY_NAME = "WebView2Loader.dll"

# --- Library build (cargo) ---

LIBRARY_BUILD_COMMAND = ("cargo", "build", "--release")
LIBRARY_BUILD_JOBS = 1
STATIC_RUNTIME_ENV = {"RUSTFLAGS": "-C target-feature=+crt-static"}

# --- Launcher compile/link (MSVC) ---

COMPILER_COMMAND = ("cl", "/nologo", "/O2", "/MT", "/EHsc")
ENTRY_POINT = "packager/main.cpp"
OUTPUT_NAME = "Browser.exe"

SYSTEM_LIBRARIES = (
    "user32.lib",
    "shell32.lib",
    "ole32.lib",
    "oleaut32.lib",
    "advapi32.lib",
    "gdi32.lib",
    "shlwapi.lib",
    "dwmapi.lib",
    "uxtheme.lib",
    "bcrypt.lib",
    "imm32.lib",
    "ws2_32.lib",
    "crypt32.lib",
    "propsys.lib",
    "ntdll.lib",
)


def library_build_argv(config: BundleConfig) -> list[str]:
    """Return the library build command, with the job limit appended.

    Args:
        config: Effective bundle configuration.

    Returns:
        The argument vector, e.g. ``["cargo", "build", "--release", "-j", "1"]``.
    """
    argv = list(config.library.command)
    if config.library.jobs is not None:
        argv.extend(["-j", str(config.library.jobs)])
    return argv


def library_build_env(config: BundleConfig) -> dict[str, str]:
    """Return the extra environment for the library build (static CRT by default)."""
    return dict(config.library.env)


def link_argv(config: BundleConfig, layout: BuildLayout) -> list[str]:
    """Return the compile/link command for the launcher executable.

    The library search path is the absolute release directory, so the
    command does not depend on the working directory it runs in.

    Args:
        config: Effective bundle configuration.
        layout: Paths derived from the located project root.

    Returns:
        The argument vector for the compiler driver.
    """
    link = config.link
    return [
        *link.compiler,
        str(layout.entry_point),
        f"/Fe:{link.output_name}",
        "/link",
        f"/LIBPATH:{layout.release_dir}",
        config.artifact_name,
        *link.system_libraries,
    ]
