"""
mpcc - MiniPy Translator Command-Line Interface
===============================================

This module implements the command-line interface for the MiniPy to C
translator.

Usage Examples
--------------
Translate to stdout:
    $ mpcc loop.mpy

With output file:
    $ mpcc loop.mpy -o loop.c

From standard input:
    $ cat loop.mpy | mpcc -

Full pipeline to an executable:
    $ mpcc loop.mpy -o loop.c && cc loop.c -o loop && ./loop

Debugging:
    $ mpcc --tokens loop.mpy
    $ mpcc --ast loop.mpy
    $ mpcc -v loop.mpy
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

import click

from minipy import __version__
from minipy.cli.errors import ExitCode, handle_cli_exception
from minipy.translator import ASTPrinter, Translator, TranslatorOptions
from minipy.translator.errors import TranslationErrorCollector

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    default="-",
    type=click.File("r", encoding="utf-8"),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output C file (default: stdout)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--max-indent",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum block nesting depth (default: 100, or $MINIPY_MAX_INDENT)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging on stderr)",
)
@click.version_option(version=__version__, prog_name="mpcc")
def main(
    input_file: TextIO,
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    max_indent: Optional[int],
    verbose: bool,
) -> None:
    """
    Translate a MiniPy program to C.

    INPUT_FILE is the MiniPy source file (.mpy) to translate. When it is
    omitted or '-', the program is read from standard input.

    The generated C program declares every variable as a double, runs
    the translated statements, then prints each variable's final value.
    No output is produced if any error is found.

    \b
    Examples:
        mpcc loop.mpy                # C program on stdout
        mpcc loop.mpy -o loop.c      # Specify output file
        mpcc --tokens loop.mpy       # Show tokens only
        mpcc --max-indent 8 a.mpy    # Limit block nesting

    \b
    Exit codes:
        0  success
        1  translation errors
        2  invalid arguments or unreadable input
        3  internal error
        4  translation aborted (nesting too deep)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    options = TranslatorOptions.from_env()
    if max_indent is not None:
        options.max_indent_levels = max_indent

    filename = getattr(input_file, "name", "<stdin>")
    translator = Translator(options)

    try:
        source = input_file.read()
        logger.info("Translating %s (max indent %d)", filename, options.max_indent_levels)

        # Token dump mode
        if tokens:
            token_list, errors = translator.scan(source, filename)
            for token in token_list:
                click.echo(repr(token))
            if errors:
                collector = TranslationErrorCollector()
                collector.errors.extend(errors)
                click.echo(collector.report(), err=True)
                sys.exit(ExitCode.TRANSLATION_ERROR)
            return

        result = translator.translate_source(source, filename)

        # AST dump mode
        if ast:
            click.echo(ASTPrinter().print(result.ast))
            if not result.success:
                click.echo(result.report(), err=True)
                sys.exit(ExitCode.TRANSLATION_ERROR)
            return

        if not result.success:
            click.echo(result.report(), err=True)
            sys.exit(ExitCode.TRANSLATION_ERROR)

        # Write output
        if output is None:
            click.echo(result.c_source, nl=False)
        else:
            output.write_text(result.c_source, encoding="utf-8")
            logger.info("Wrote %d bytes to %s", len(result.c_source), output)

        logger.info(
            "Translated %s: %d tokens, %d variables",
            filename, result.token_count, len(result.symbols),
        )

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
