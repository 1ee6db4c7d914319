"""
CLI Error Handling
==================

Maps exceptions escaping a translation run to messages and exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes for the mpcc tool."""
    SUCCESS = 0
    TRANSLATION_ERROR = 1  # Errors were recorded, no output produced
    INVALID_ARGS = 2       # Invalid arguments or unreadable input
    INTERNAL_ERROR = 3     # Unexpected internal error
    FATAL_ERROR = 4        # Translation aborted (indentation overflow)


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception on stderr and exit with the matching code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from minipy.translator.errors import IndentationOverflowError, TranslationError

    if isinstance(error, IndentationOverflowError):
        # Already formatted with location and "error:" prefix
        click.echo(str(error), err=True)
        click.echo("translation aborted", err=True)
        sys.exit(ExitCode.FATAL_ERROR)

    elif isinstance(error, TranslationError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.TRANSLATION_ERROR)

    elif isinstance(error, UnicodeDecodeError):
        # Input is not valid UTF-8
        click.echo(f"Error: cannot decode input: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        # Missing, unreadable or unwritable files
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
