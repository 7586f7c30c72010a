"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Every build stage failure maps to :data:`EXIT_GENERIC_FAILURE` so that
wrappers only need to distinguish success from failure. The remaining codes
cover usage errors raised by Typer itself and interruption.
"""

EXIT_SUCCESS = 0
"""The bundle was built (or the dry run completed)."""

EXIT_GENERIC_FAILURE = 1
"""A build stage failed or the configuration was invalid."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_INTERRUPTED = 130
"""The build was cancelled with Ctrl-C."""
