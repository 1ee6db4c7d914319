"""
MiniPy Translator Main Module
=============================

This module provides the main translator interface for MiniPy.
It orchestrates the complete translation process:

    Source → Lex → Parse → Emit → C program

Usage
-----
Command line:
    $ mpcc program.mpy -o program.c

Programmatic:
    >>> from minipy.translator import translate
    >>> c_source = translate('x = 1\\n')

Translation Pipeline
--------------------
1. **Lexical Analysis**: Convert source to tokens, synthesizing
   INDENT/DEDENT from leading whitespace
2. **Parsing**: Build the syntax tree, declaring variables on assignment
   and checking every use against the symbol table
3. **Emission**: Render the tree and the symbol table as C

The lexer runs lazily inside the parser, pulling one token at a time.

Error Handling
--------------
Every non-fatal error is collected and the run continues to the end of
input, so all problems are reported together. C output is produced only
when no error was recorded. Excessive nesting raises
IndentationOverflowError and aborts the run.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from minipy.translator.ast import ProgramNode
from minipy.translator.context import TranslationContext
from minipy.translator.emitter import CEmitter
from minipy.translator.errors import (
    TranslationError,
    TranslationErrorCollector,
    TranslationFailedError,
)
from minipy.translator.lexer import (
    DEFAULT_MAX_INDENT_LEVELS,
    IndentLexer,
    Token,
    split_source_lines,
)
from minipy.translator.parser import MiniPyParser

logger = logging.getLogger(__name__)


@dataclass
class TranslatorOptions:
    """
    Translator configuration options.

    Attributes:
        max_indent_levels: Deepest block nesting accepted before the run
                           aborts with IndentationOverflowError
        filename: Name used in diagnostics when none is given per call
    """
    max_indent_levels: int = DEFAULT_MAX_INDENT_LEVELS
    filename: str = "<input>"

    @classmethod
    def from_env(cls) -> "TranslatorOptions":
        """
        Create TranslatorOptions from environment variables.

        Environment variables (all optional):
            MINIPY_MAX_INDENT: Maximum nesting depth (positive integer)

        Returns:
            TranslatorOptions with values from environment variables
        """
        options = cls()

        if max_indent := os.environ.get("MINIPY_MAX_INDENT"):
            try:
                value = int(max_indent)
            except ValueError:
                value = 0
            if value > 0:
                options.max_indent_levels = value
            else:
                logger.debug("Ignoring invalid MINIPY_MAX_INDENT=%r", max_indent)

        return options


@dataclass
class TranslationResult:
    """
    Result of a translation.

    Attributes:
        filename: Source filename
        success: True if no error was recorded
        c_source: Generated C program (empty when success is False)
        ast: Syntax tree, also available after recoverable errors
        symbols: Declared variable names in declaration order
        token_count: Number of tokens the parser consumed
        errors: Recorded errors in order of occurrence
    """
    filename: str = ""
    success: bool = False
    c_source: str = ""
    ast: Optional[ProgramNode] = None
    symbols: list[str] = field(default_factory=list)
    token_count: int = 0
    errors: list[TranslationError] = field(default_factory=list)

    def report(self) -> str:
        """Format the recorded errors followed by a summary line."""
        collector = TranslationErrorCollector()
        collector.errors.extend(self.errors)
        return collector.report()


class Translator:
    """
    MiniPy to C translator.

    Each call runs with a fresh TranslationContext, so one Translator
    can be reused for any number of sources.

    Example:
        translator = Translator()
        result = translator.translate_file("program.mpy")
        if result.success:
            print(result.c_source)

    Attributes:
        options: Translator configuration options
    """

    def __init__(self, options: Optional[TranslatorOptions] = None):
        self.options = options or TranslatorOptions()

    def translate_source(self, source: str, filename: Optional[str] = None) -> TranslationResult:
        """
        Translate MiniPy source code to C.

        Args:
            source: MiniPy source text
            filename: Source filename for error messages

        Returns:
            TranslationResult with the C program or the recorded errors

        Raises:
            IndentationOverflowError: If nesting exceeds the configured limit
        """
        filename = filename or self.options.filename
        context = TranslationContext()

        lexer = IndentLexer(source, filename, context, self.options.max_indent_levels)
        parser = MiniPyParser(lexer.tokenize(), filename, context, split_source_lines(source))
        program = parser.parse()

        result = TranslationResult(
            filename=filename,
            ast=program,
            symbols=context.symbols.names(),
            token_count=parser.token_count,
            errors=list(context.errors.errors),
        )

        if context.errors.has_errors():
            logger.debug(
                "Translation of %s failed with %d errors",
                filename, context.error_count(),
            )
            return result

        result.c_source = CEmitter().emit(program, context.symbols)
        result.success = True
        logger.debug(
            "Translated %s: %d tokens, %d variables",
            filename, result.token_count, len(result.symbols),
        )
        return result

    def translate_file(self, filepath: str) -> TranslationResult:
        """
        Translate a MiniPy source file to C.

        Args:
            filepath: Path to the MiniPy source file

        Returns:
            TranslationResult with the C program or the recorded errors

        Raises:
            FileNotFoundError: If source file not found
            IndentationOverflowError: If nesting exceeds the configured limit
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.translate_source(source, str(filepath))

    def scan(
        self, source: str, filename: Optional[str] = None
    ) -> tuple[list[Token], list[TranslationError]]:
        """
        Run the lexer alone.

        Args:
            source: MiniPy source text
            filename: Source filename for error messages

        Returns:
            Tuple of (tokens, lexical errors)

        Raises:
            IndentationOverflowError: If nesting exceeds the configured limit
        """
        filename = filename or self.options.filename
        context = TranslationContext()
        lexer = IndentLexer(source, filename, context, self.options.max_indent_levels)
        tokens = list(lexer.tokenize())
        return tokens, list(context.errors.errors)


# =============================================================================
# Convenience Functions
# =============================================================================

def translate(
    source: str,
    filename: str = "<input>",
    options: Optional[TranslatorOptions] = None,
) -> str:
    """
    Translate MiniPy source code to C.

    This is the primary high-level interface for the translator.

    Args:
        source: MiniPy source code
        filename: Source filename for error messages
        options: Translator configuration (defaults when omitted)

    Returns:
        Generated C program

    Raises:
        TranslationFailedError: If any error was recorded
        IndentationOverflowError: If nesting exceeds the configured limit

    Example:
        >>> c_source = translate('''
        ... x = 1
        ... while x < 10:
        ...     x = x * 2
        ... ''')
    """
    result = Translator(options).translate_source(source, filename)
    if not result.success:
        raise TranslationFailedError(result.report(), result.errors)
    return result.c_source


def translate_file(
    filepath: str,
    output_path: Optional[str] = None,
    options: Optional[TranslatorOptions] = None,
) -> str:
    """
    Translate a MiniPy source file to C.

    Args:
        filepath: Path to MiniPy source file
        output_path: Optional path to write the C program to
        options: Translator configuration (defaults when omitted)

    Returns:
        Generated C program

    Raises:
        TranslationFailedError: If any error was recorded
        FileNotFoundError: If source file not found

    Example:
        >>> c_source = translate_file("loop.mpy", "loop.c")
    """
    result = Translator(options).translate_file(filepath)
    if not result.success:
        raise TranslationFailedError(result.report(), result.errors)

    if output_path:
        Path(output_path).write_text(result.c_source, encoding="utf-8")

    return result.c_source
