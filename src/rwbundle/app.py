"""Typer application and CLI entry point for rwbundle.

Running ``rwbundle`` with no sub-command performs the full build from the
root callback. The only sub-command group is ``config`` for inspecting the
effective configuration.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`rwbundle.sequencer`: The build stages run by :func:`main_callback`.
    :mod:`rwbundle.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from rwbundle import __version__
from rwbundle.exceptions import BundlerError
from rwbundle.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="rwbundle",
    help="Build the Rusty-Web browser: Rust static library plus C++ launcher.",
    invoke_without_command=True,
    add_completion=False,
    rich_markup_mode="rich",
)

config_app = typer.Typer(no_args_is_help=True)
app.add_typer(config_app, name="config", help="Configuration inspection.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"rwbundle {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to an rwbundle.json config file."
    ),
    strict_dependency: bool = typer.Option(
        False,
        "--strict-dependency",
        help="Fail if the runtime dependency is missing or cannot be copied.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the build commands without running them."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress progress output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Build the static library, verify it, and link the launcher.

    Installs the global :class:`~rwbundle.output.OutputManager`, resolves the
    effective configuration, and stores it in ``ctx.obj``. When no
    sub-command was given the build runs here; any
    :class:`~rwbundle.exceptions.BundlerError` is printed to stderr and
    turned into its exit code.
    """
    from rwbundle.config import resolve_config
    from rwbundle.output import OutputManager, error, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    try:
        config, config_path = resolve_config(
            cli_config=config_file,
            cli_strict_dependency=strict_dependency,
        )
    except BundlerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path

    if ctx.invoked_subcommand is not None:
        return

    from rwbundle.sequencer import BuildSequencer

    try:
        BuildSequencer(config, dry_run=dry_run).run()
    except BundlerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False, "--json", help="Print raw JSON even on a terminal."
    ),
) -> None:
    """Show the effective configuration.

    Prints the config file in use (if any) followed by the merged
    configuration: defaults, project file, environment, and flags.

    Example::

        rwbundle config show
        rwbundle --strict-dependency config show --json
    """
    from rwbundle.output import format_response, info, print_data

    config_path = ctx.obj.get("config_path")
    info(f"Config file: {config_path if config_path else '(none, using defaults)'}")
    data = ctx.obj["config"].model_dump(mode="json")
    if json_output:
        import json

        print_data(json.dumps(data, indent=2))
    else:
        format_response(data)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from rwbundle.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``rwbundle`` console script.

    :class:`~rwbundle.exceptions.BundlerError` instances that escape the
    Typer app cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from rwbundle.output import error

        if isinstance(exc, BundlerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
