"""rwbundle -- build orchestrator for the Rusty-Web browser bundle.

Compiles the Rust core as a static library with ``cargo``, verifies the
produced artifact, copies the optional WebView2 loader next to the final
executable, and links the C++ launcher against the library with MSVC ``cl``.

Typical workflow::

    rwbundle                 # full build from the project root
    rwbundle --dry-run       # print the commands without running them
    rwbundle config show     # inspect the effective configuration

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic configuration models and build result types.
    config: Project config loading and precedence resolution.
    toolchain: Static toolchain table and argument-vector construction.
    paths: Root location and existence checks.
    runner: Synchronous subprocess wrapper.
    sequencer: The build state machine.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stdout/stderr output system with Rich support.
"""

__version__ = "0.1.0"
