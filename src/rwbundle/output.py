"""Output system with stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions, adapted to a build tool:

* **stdout** -- routine progress (banners, step headings, the commands being
  run, success messages) and data printed by ``config show``.
* **stderr** -- warnings and errors. Never suppressed.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process or a CI log.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~rwbundle.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`step`,
   :func:`error`, etc.) that delegate to the global ``OutputManager`` so the
   sequencer and runner do not need to pass the manager around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

_BANNER_RULE = "=" * 43


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (progress and data) and one for stderr (warnings and errors).

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress progress and informational messages on stdout.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
            soft_wrap=True,
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            soft_wrap=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Print structured data (a dict or list) to stdout as JSON.

        Rich mode adds syntax highlighting; plain mode prints the raw
        document so it can be piped into other tools.
        """
        json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(json_str)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout. Never suppressed."""
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Progress (stdout)
    # ------------------------------------------------------------------ #

    def banner(self, *lines: str) -> None:
        """Print *lines* between two ``=`` rules. Suppressed by ``--quiet``."""
        if self._quiet:
            return
        self._plain_or_rich(_BANNER_RULE, "bold")
        for line in lines:
            self._plain_or_rich(line, "bold")
        self._plain_or_rich(_BANNER_RULE, "bold")

    def step(self, message: str) -> None:
        """Print a step heading, preceded by a blank line. Suppressed by ``--quiet``."""
        if self._quiet:
            return
        self._plain_or_rich("", None)
        self._plain_or_rich(message, "bold cyan")

    def info(self, message: str) -> None:
        """Print an informational message to stdout. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._plain_or_rich(message, None)

    def success(self, message: str) -> None:
        """Print a green success message to stdout. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._plain_or_rich(message, "green")

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _plain_or_rich(self, message: str, style: Optional[str]) -> None:
        if self._no_color or self._format != OutputFormat.RICH or style is None:
            print(message, file=sys.stdout, flush=True)
        else:
            self._stdout.print(f"[{style}]{escape(message)}[/{style}]")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    """Print structured data via the global OutputManager."""
    get_output().format_response(data)


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def banner(*lines: str) -> None:
    """Print a banner via the global OutputManager."""
    get_output().banner(*lines)


def step(message: str) -> None:
    """Print a step heading via the global OutputManager."""
    get_output().step(message)


def info(message: str) -> None:
    """Print info message to stdout via the global OutputManager."""
    get_output().info(message)


def success(message: str) -> None:
    """Print success message to stdout via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
