"""
MiniPy Indentation-Tracking Lexer
=================================

This module implements the lexer for MiniPy, a small Python-like
language. It converts source text into a stream of tokens for the
parser, synthesizing INDENT and DEDENT tokens from changes in the width
of leading whitespace.

Token Categories
----------------
- Keywords: and, break, elif, else, if, not, or, while
- Boolean literals: True (value 1), False (value 0)
- Identifiers: [A-Za-z_][A-Za-z0-9_]*
- Numbers: integers (123) and floats (1.5, .5); floats need digits after the dot
- Operators: = + - * / == != >= > <= <
- Delimiters: ( ) , :
- Structural: NEWLINE, INDENT, DEDENT, EOF

Indentation
-----------
The lexer keeps a stack of open indentation widths, with 0 always at
the bottom. At the start of every line that has content, the width of
its leading whitespace (spaces and tabs count one column each) is
compared with the top of the stack:

| Width vs top | Action                                               |
|--------------|------------------------------------------------------|
| greater      | push width, emit INDENT                              |
| less         | pop while top > width, one DEDENT per pop; the       |
|              | remaining top must equal width or a mismatch error   |
|              | is recorded                                          |
| equal        | nothing                                              |

Blank lines and comment-only lines never affect indentation. Structural
tokens owed to the parser are held in a pending queue which is always
drained before more input is scanned. At end of input every level still
open is closed with a DEDENT, so INDENT and DEDENT tokens always
balance.

Comments
--------
- Whole-line: # comment
- Trailing: x = 1  # comment

Example Usage
-------------
>>> from minipy.translator.lexer import IndentLexer
>>> source = 'if x:\\n    y = 1\\n'
>>> for token in IndentLexer(source, "prog.py").tokenize():
...     print(token)
Token(IF, 'if', 1:1)
Token(IDENTIFIER, 'x', 1:4)
Token(COLON, ':', 1:5)
Token(NEWLINE, 1:6)
Token(INDENT, 2:5)
Token(IDENTIFIER, 'y', 2:5)
Token(ASSIGN, '=', 2:7)
Token(INTEGER, 1, 2:9)
Token(NEWLINE, 2:10)
Token(DEDENT, 3:1)
Token(EOF, 3:1)
"""

import logging
import math
import string
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from minipy.errors import SourceLocation
from minipy.translator.context import TranslationContext
from minipy.translator.errors import (
    IndentationMismatchError,
    IndentationOverflowError,
    InvalidCharacterError,
    NumberOutOfRangeError,
)

logger = logging.getLogger(__name__)


# Default limit on nested indentation levels above the base level
DEFAULT_MAX_INDENT_LEVELS = 100

# Largest integer literal that is a valid signed 64-bit C constant
MAX_INTEGER_LITERAL = 2**63 - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the MiniPy language."""

    # === Structural Tokens ===
    EOF = auto()            # End of input
    NEWLINE = auto()        # End of a line with content
    INDENT = auto()         # Start of a nested block
    DEDENT = auto()         # End of a nested block

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Variable names
    INTEGER = auto()        # 123
    FLOAT = auto()          # 1.5, .5
    BOOLEAN = auto()        # True, False

    # === Keywords ===
    AND = auto()            # and
    BREAK = auto()          # break
    ELIF = auto()           # elif
    ELSE = auto()           # else
    IF = auto()             # if
    NOT = auto()            # not
    OR = auto()             # or
    WHILE = auto()          # while

    # === Operators ===
    ASSIGN = auto()         # =
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    EQ = auto()             # ==
    NE = auto()             # !=
    GT = auto()             # >
    GE = auto()             # >=
    LT = auto()             # <
    LE = auto()             # <=

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    COMMA = auto()          # ,
    COLON = auto()          # :


# Map keyword strings to their token types
KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
    "if": TokenType.IF,
    "not": TokenType.NOT,
    "or": TokenType.OR,
    "while": TokenType.WHILE,
}

# Boolean literal words and the numeric value they carry
BOOLEAN_LITERALS: dict[str, int] = {
    "True": 1,
    "False": 0,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from MiniPy source code.

    Attributes:
        type: The TokenType classification
        value: Payload: name for identifiers, int/float for numbers,
               1/0 for booleans, the lexeme for keywords and operators,
               None for structural tokens
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | float | None
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, (int, float)):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Human readable form used in syntax error messages."""
        if self.type in (TokenType.NEWLINE, TokenType.INDENT,
                         TokenType.DEDENT, TokenType.EOF):
            return {
                TokenType.NEWLINE: "end of line",
                TokenType.INDENT: "indent",
                TokenType.DEDENT: "dedent",
                TokenType.EOF: "end of input",
            }[self.type]
        if self.type == TokenType.BOOLEAN:
            return "'True'" if self.value else "'False'"
        return f"'{self.value}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class IndentLexer:
    """
    Tokenizes MiniPy source code.

    Lexical errors (indentation mismatches and unrecognized characters)
    are recorded in the translation context and scanning continues, so
    the lexer always reaches end of input. The only exception it raises
    is IndentationOverflowError.

    A lexer instance tokenizes its source once; create a new one per run.

    Usage:
        lexer = IndentLexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
        context: Shared translation state receiving recorded errors
        max_indent_levels: Maximum number of open levels above the base
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Leading and inline whitespace (newlines are significant)
    WHITESPACE = " \t"

    SINGLE_TOKENS = {
        "+": TokenType.PLUS,
        "-": TokenType.MINUS,
        "*": TokenType.STAR,
        "/": TokenType.SLASH,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        ",": TokenType.COMMA,
        ":": TokenType.COLON,
    }

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        context: Optional[TranslationContext] = None,
        max_indent_levels: int = DEFAULT_MAX_INDENT_LEVELS,
    ):
        self.source = source
        self.filename = filename
        self.context = context if context is not None else TranslationContext()
        self.max_indent_levels = max_indent_levels

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

        # Open indentation widths; strictly increasing, base level 0
        self._indent_stack: list[int] = [0]

        # Structural tokens owed to the parser before scanning resumes
        self._pending: deque[Token] = deque()

    @property
    def indent_depth(self) -> int:
        """Number of indentation levels currently open above the base."""
        return len(self._indent_stack) - 1

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects, ending with a single EOF token

        Raises:
            IndentationOverflowError: If nesting exceeds max_indent_levels
        """
        while not self._at_end():
            self._scan_line_start()
            yield from self._drain_pending()

            if self._at_end():
                break

            yield from self._scan_line_body()

        # Close every block still open
        while len(self._indent_stack) > 1:
            width = self._indent_stack.pop()
            logger.debug("Closed indentation level %d at end of input", width)
            yield self._make_token(TokenType.DEDENT, None)

        yield self._make_token(TokenType.EOF, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at a character without advancing; empty string past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line and column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _at_newline(self) -> bool:
        """True at a Unix or Windows line terminator."""
        return self._peek() == "\n" or (self._peek() == "\r" and self._peek(1) == "\n")

    def _consume_newline(self) -> None:
        if self._peek() == "\r":
            self._advance()
        self._advance()

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | float | None,
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _drain_pending(self) -> Iterator[Token]:
        while self._pending:
            yield self._pending.popleft()

    # =========================================================================
    # Line Start and Indentation
    # =========================================================================

    def _scan_line_start(self) -> None:
        """
        Skip blank and comment-only lines, then measure indentation.

        Leaves the position at the first content character of the next
        line with content (or at end of input), with any INDENT/DEDENT
        tokens for that line queued in the pending buffer.
        """
        while not self._at_end():
            width = 0
            while self._peek() and self._peek() in self.WHITESPACE:
                self._advance()
                width += 1

            if self._at_end():
                return

            if self._peek() == "#":
                self._skip_comment()
                if self._at_newline():
                    self._consume_newline()
                continue

            if self._at_newline():
                self._consume_newline()
                continue

            self._update_indentation(width)
            return

    def _update_indentation(self, width: int) -> None:
        """Compare a line's indentation with the stack and queue tokens."""
        top = self._indent_stack[-1]

        if width > top:
            if self.indent_depth >= self.max_indent_levels:
                raise IndentationOverflowError(
                    self.max_indent_levels,
                    SourceLocation(self.filename, self._line, self._column),
                    self._get_current_line(),
                )
            self._indent_stack.append(width)
            logger.debug("Line %d: pushed indentation level %d", self._line, width)
            self._pending.append(self._make_token(TokenType.INDENT, None))
            return

        if width < top:
            while self._indent_stack[-1] > width:
                popped = self._indent_stack.pop()
                logger.debug("Line %d: popped indentation level %d", self._line, popped)
                self._pending.append(self._make_token(TokenType.DEDENT, None))

            if self._indent_stack[-1] != width:
                self.context.errors.add(IndentationMismatchError(
                    width,
                    self._indent_stack[-1],
                    SourceLocation(self.filename, self._line, self._column),
                    self._get_current_line(),
                ))

    # =========================================================================
    # Line Body Scanning
    # =========================================================================

    def _scan_line_body(self) -> Iterator[Token]:
        """
        Tokenize the rest of a content line, ending with NEWLINE.

        A NEWLINE is synthesized when the final line of the input has
        no line terminator.
        """
        while True:
            self._skip_inline_whitespace()

            if self._peek() == "#":
                self._skip_comment()

            if self._at_end():
                yield self._make_token(TokenType.NEWLINE, None)
                return

            if self._at_newline():
                yield self._make_token(TokenType.NEWLINE, None)
                self._consume_newline()
                return

            token = self._scan_token()
            if token is not None:
                yield token

    def _skip_inline_whitespace(self) -> None:
        while self._peek() and self._peek() in self.WHITESPACE:
            self._advance()

    def _skip_comment(self) -> None:
        """Skip from '#' up to (not including) the line terminator."""
        while not self._at_end() and not self._at_newline():
            self._advance()

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token from the current line.

        Returns:
            The next Token, or None if an unrecognized character was skipped
        """
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_word(start_line, start_column)

        if _is_digit(char) or (char == "." and _is_digit(self._peek(1))):
            return self._scan_number(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def _scan_word(self, start_line: int, start_column: int) -> Token:
        """Scan a keyword, boolean literal or identifier."""
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        word = "".join(chars)

        if word in KEYWORDS:
            return self._make_token(KEYWORDS[word], word, start_line, start_column)

        if word in BOOLEAN_LITERALS:
            return self._make_token(
                TokenType.BOOLEAN, BOOLEAN_LITERALS[word], start_line, start_column
            )

        return self._make_token(TokenType.IDENTIFIER, word, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal.

        A float needs a dot followed by at least one digit; the leading
        digits are optional. "1." therefore scans as the integer 1
        followed by an unrecognized '.'.

        A literal C cannot represent (an integer above MAX_INTEGER_LITERAL
        or a float that overflows to infinity) is recorded as an error;
        the token still carries a value so that parsing continues.
        """
        chars = []
        while _is_digit(self._peek()):
            chars.append(self._advance())

        if self._peek() == "." and _is_digit(self._peek(1)):
            chars.append(self._advance())
            while _is_digit(self._peek()):
                chars.append(self._advance())
            lexeme = "".join(chars)
            value = float(lexeme)
            if math.isinf(value):
                self._out_of_range(lexeme, start_line, start_column)
            return self._make_token(TokenType.FLOAT, value, start_line, start_column)

        lexeme = "".join(chars)
        # Length check first: int() refuses very long digit strings
        digits = lexeme.lstrip("0") or "0"
        if len(digits) > len(str(MAX_INTEGER_LITERAL)) or int(digits) > MAX_INTEGER_LITERAL:
            self._out_of_range(lexeme, start_line, start_column)
            return self._make_token(
                TokenType.INTEGER, MAX_INTEGER_LITERAL, start_line, start_column
            )

        return self._make_token(TokenType.INTEGER, int(digits), start_line, start_column)

    def _out_of_range(self, lexeme: str, start_line: int, start_column: int) -> None:
        self.context.errors.add(NumberOutOfRangeError(
            lexeme,
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        ))

    def _scan_operator(self, start_line: int, start_column: int) -> Optional[Token]:
        """Scan an operator or delimiter, two-character forms first."""
        char = self._advance()

        if char == "=":
            if self._match("="):
                return self._make_token(TokenType.EQ, "==", start_line, start_column)
            return self._make_token(TokenType.ASSIGN, "=", start_line, start_column)

        if char == "!" and self._match("="):
            return self._make_token(TokenType.NE, "!=", start_line, start_column)

        if char == ">":
            if self._match("="):
                return self._make_token(TokenType.GE, ">=", start_line, start_column)
            return self._make_token(TokenType.GT, ">", start_line, start_column)

        if char == "<":
            if self._match("="):
                return self._make_token(TokenType.LE, "<=", start_line, start_column)
            return self._make_token(TokenType.LT, "<", start_line, start_column)

        if char in self.SINGLE_TOKENS:
            return self._make_token(self.SINGLE_TOKENS[char], char, start_line, start_column)

        self.context.errors.add(InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        ))
        return None

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end].rstrip("\r")


def _is_digit(char: str) -> bool:
    """ASCII digit test; str.isdigit() also accepts superscripts and the like."""
    return char != "" and char in string.digits


def tokenize(
    source: str,
    filename: str = "<input>",
    context: Optional[TranslationContext] = None,
    max_indent_levels: int = DEFAULT_MAX_INDENT_LEVELS,
) -> list[Token]:
    """Tokenize a whole source string and return the token list."""
    return list(IndentLexer(source, filename, context, max_indent_levels).tokenize())


def split_source_lines(source: str) -> list[str]:
    """
    Split source text into lines the way the lexer counts them.

    Only '\\n' ends a line; a trailing '\\r' is dropped from each line.
    """
    return [line.rstrip("\r") for line in source.split("\n")]
