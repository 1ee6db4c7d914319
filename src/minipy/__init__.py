"""
MiniPy - Indentation-Sensitive Language to C Translator
=======================================================

This package translates MiniPy, a small language with Python-like
significant indentation, into a self-contained C program.

A MiniPy program is a sequence of assignments, if/elif/else chains,
while loops and break statements over floating-point variables. Every
variable assigned anywhere in the program is declared as a C double,
and the generated program prints the final value of each variable.

Main Components
---------------
- **translator**: Lexer, parser, symbol table and C emitter
    Converts MiniPy source (.mpy) to C source (.c)

- **cli**: Command-line tool (mpcc)

Quick Start
-----------
Translate a program:
    >>> from minipy import translate
    >>> print(translate('x = 1\\nwhile x < 100:\\n    x = x * 2\\n'))

Or use the command-line tool:
    $ mpcc loop.mpy -o loop.c
    $ cc loop.c -o loop && ./loop
"""

__version__ = "1.0.0"
__author__ = "MiniPy Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from minipy.errors import MiniPyError, SourceLocation
from minipy.translator import (
    Translator,
    TranslatorOptions,
    TranslationResult,
    translate,
    translate_file,
)

__all__ = [
    "__version__",
    # Errors
    "MiniPyError",
    "SourceLocation",
    # Translator
    "Translator",
    "TranslatorOptions",
    "TranslationResult",
    "translate",
    "translate_file",
]
