"""
MiniPy Translator Error Hierarchy
=================================

This module defines the exception hierarchy for the MiniPy translator.
All exceptions inherit from TranslationError, which itself inherits from
the base MiniPyError for consistent error handling across the toolchain.

Exception Hierarchy
-------------------
TranslationError (base for all translator errors)
├── LexicalError - errors found while scanning
│   ├── IndentationMismatchError - dedent to a width never pushed
│   ├── IndentationOverflowError - too many nested levels (fatal)
│   ├── InvalidCharacterError - character matching no lexical rule
│   └── NumberOutOfRangeError - literal C cannot represent
├── ParseError - token does not continue any grammar rule
│   ├── StrayIndentError - INDENT where a statement was expected
│   └── ExpressionTooDeepError - parentheses or prefixes nested too deeply
├── SemanticError - errors found while resolving names
│   └── UndefinedVariableError - variable used before assignment
└── TranslationFailedError - aggregate report of collected errors

Fatal vs Non-Fatal
------------------
Only IndentationOverflowError is ever raised out of the translator.
Every other error is created and handed to a TranslationErrorCollector,
so that the whole input is processed and every problem is reported in
a single run. Any collected error suppresses the C output.

Error Message Format
--------------------
    prog.py:3:5: error: undefined variable 'cuont'
        y = cuont + 1
            ^
    hint: did you mean 'count'?
"""

import logging
from typing import Optional, List

from minipy.errors import MiniPyError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Base Translator Exception
# =============================================================================

class TranslationError(MiniPyError):
    """
    Base exception for all translator errors.

    Provides message formatting with source location, the offending
    source line, a caret under the error column, and an optional hint.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location, source context, and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class TranslationFailedError(TranslationError):
    """
    Aggregate error raised by the convenience API when errors were collected.

    The message is already a formatted report from the collector and is
    passed through unchanged.

    Attributes:
        errors: The individual errors that were collected
    """

    def __init__(self, report: str, errors: Optional[List[TranslationError]] = None):
        self.errors = list(errors or [])
        super().__init__(report)

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(TranslationError):
    """Error found by the lexer while scanning source text."""
    pass


class IndentationMismatchError(LexicalError):
    """
    Dedent to a width that does not match any open indentation level.

    Example:
        if x > 0:
            y = 1
          z = 2      # width 2 was never pushed
    """

    def __init__(
        self,
        width: int,
        expected: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.width = width
        self.expected = expected
        super().__init__(
            f"unindent to width {width} does not match any outer indentation level",
            location=location,
            hint=f"the enclosing block is indented to width {expected}",
            source_line=source_line,
        )


class IndentationOverflowError(LexicalError):
    """
    Too many nested indentation levels.

    This is the only fatal error: it is raised rather than collected,
    and aborts the whole translation.
    """

    def __init__(
        self,
        max_levels: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.max_levels = max_levels
        super().__init__(
            f"too many indentation levels (maximum is {max_levels})",
            location=location,
            source_line=source_line,
        )


class InvalidCharacterError(LexicalError):
    """Character that matches no lexical rule. It is skipped."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unrecognized character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class NumberOutOfRangeError(LexicalError):
    """
    Numeric literal outside the range of its C form.

    Integers must fit a signed 64-bit C constant and floats must stay
    finite as doubles.
    """

    def __init__(
        self,
        lexeme: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.lexeme = lexeme
        shown = lexeme if len(lexeme) <= 24 else f"{lexeme[:20]}..."
        super().__init__(
            f"numeric literal {shown} is out of range",
            location=location,
            hint="integers must not exceed 9223372036854775807 and floats must be finite",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(TranslationError):
    """
    Token stream does not match any grammar continuation.

    The parser recovers by discarding tokens up to the next NEWLINE.
    """
    pass


class UnexpectedTokenError(ParseError):
    """Unexpected token during parsing."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"syntax error at {found}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class StrayIndentError(ParseError):
    """Indented block where a statement was expected."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unexpected indent",
            location=location,
            hint="only the body of 'if', 'elif', 'else' and 'while' may be indented",
            source_line=source_line,
        )


class ExpressionTooDeepError(ParseError):
    """Parentheses or prefix operators nested beyond the parser's limit."""

    def __init__(
        self,
        max_depth: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.max_depth = max_depth
        super().__init__(
            f"expression nested too deeply (maximum is {max_depth} levels)",
            location=location,
            hint="split the expression over several assignments",
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class SemanticError(TranslationError):
    """Source is well-formed but refers to names incorrectly."""
    pass


class UndefinedVariableError(SemanticError):
    """
    Variable referenced before any assignment to it.

    Translation continues with the bare name so that later errors are
    still found. Similar declared names are offered as a hint.
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_names: Optional[List[str]] = None,
    ):
        self.name = name
        self.similar_names = similar_names or []

        hint = None
        if self.similar_names:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_names[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined variable '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class TranslationErrorCollector:
    """
    Collects non-fatal errors in the order they occur.

    The lexer and parser share one collector through the translation
    context. The error count decides whether the emitter runs.

    Example:
        collector = TranslationErrorCollector()
        collector.add(InvalidCharacterError("$", location))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[TranslationError] = []

    def add(self, error: TranslationError) -> None:
        """Record an error."""
        logger.debug("Recorded %s: %s", type(error).__name__, error.message)
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display, followed by a summary line."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)
