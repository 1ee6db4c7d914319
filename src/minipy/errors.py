"""
MiniPy Error Hierarchy
======================

This module defines the root of the exception hierarchy for the MiniPy
toolchain. All exceptions inherit from MiniPyError, allowing callers to
catch every toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
MiniPyError (base)
└── TranslationError (translator-related, see minipy.translator.errors)
    ├── LexicalError - indentation and character errors
    ├── ParseError - token stream does not match the grammar
    ├── SemanticError - undefined variables
    └── TranslationFailedError - aggregate report of collected errors

Design Philosophy
-----------------
Each exception captures source location information (filename, line,
column) when applicable. Error messages follow this format:

    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class MiniPyError(Exception):
    """
    Base exception for all MiniPy errors.

    All exceptions in the toolchain inherit from this class, allowing
    callers to catch every translator error with a single except clause:

        try:
            translate(source)
        except MiniPyError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Used by tokens, syntax nodes and errors to track where they occur
    in the source file. Frozen so that locations cannot be modified
    after a token has been produced.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
