"""
MiniPy Translator
=================

This module implements the MiniPy to C translator.

MiniPy uses Python-style significant indentation: a line ending in ':'
opens a block, and the block extends over the following lines indented
deeper than the line that opened it. This implementation provides:

- A lexer that turns leading whitespace into INDENT/DEDENT tokens
- A precedence-climbing parser producing an AST
- A symbol table that declares variables on first assignment
- An emitter that renders the AST as a complete C program

Pipeline
--------
    MiniPy Source → Lexer → Parser → AST → C Emitter → C Source

The lexer and parser run interleaved: the parser pulls tokens from the
lexer generator one at a time.

Usage
-----
>>> from minipy.translator import translate
>>> source = '''
... x = 1
... if x > 0:
...     y = x + 2
... '''
>>> print(translate(source))

Language Summary
----------------
- Statements: assignment, if/elif/else, while, break
- Operators: + - * /, == != < > <= >=, and or not, unary minus
- Literals: integers, floats, True and False
- Comments: '#' to end of line

Every variable is a C double. Using a variable before any assignment to
it has been parsed is an error.
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from minipy.translator.compiler import (
    Translator,
    TranslatorOptions,
    TranslationResult,
    translate,
    translate_file,
)
from minipy.translator.context import TranslationContext
from minipy.translator.errors import (
    TranslationError,
    TranslationFailedError,
    TranslationErrorCollector,
    LexicalError,
    IndentationMismatchError,
    IndentationOverflowError,
    InvalidCharacterError,
    NumberOutOfRangeError,
    ParseError,
    UnexpectedTokenError,
    StrayIndentError,
    ExpressionTooDeepError,
    SemanticError,
    UndefinedVariableError,
)
from minipy.translator.lexer import IndentLexer, Token, TokenType, tokenize
from minipy.translator.parser import MiniPyParser, parse_source
from minipy.translator.symbols import SymbolTable
from minipy.translator.emitter import CEmitter, emit_c
from minipy.translator.ast import (
    ASTNode,
    ASTPrinter,
    ProgramNode,
    Assignment,
    ConditionalBranch,
    IfStatement,
    WhileStatement,
    BreakStatement,
    BinaryExpression,
    UnaryExpression,
    Grouping,
    IdentifierExpression,
    IntegerLiteral,
    FloatLiteral,
    BooleanLiteral,
    BinaryOperator,
    UnaryOperator,
)

__all__ = [
    # Version
    "__version__",
    # Main API
    "Translator",
    "TranslatorOptions",
    "TranslationResult",
    "translate",
    "translate_file",
    "TranslationContext",
    # Errors
    "TranslationError",
    "TranslationFailedError",
    "TranslationErrorCollector",
    "LexicalError",
    "IndentationMismatchError",
    "IndentationOverflowError",
    "InvalidCharacterError",
    "NumberOutOfRangeError",
    "ParseError",
    "UnexpectedTokenError",
    "StrayIndentError",
    "ExpressionTooDeepError",
    "SemanticError",
    "UndefinedVariableError",
    # Lexer
    "IndentLexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "MiniPyParser",
    "parse_source",
    # Symbols
    "SymbolTable",
    # Emitter
    "CEmitter",
    "emit_c",
    # AST Nodes
    "ASTNode",
    "ASTPrinter",
    "ProgramNode",
    "Assignment",
    "ConditionalBranch",
    "IfStatement",
    "WhileStatement",
    "BreakStatement",
    "BinaryExpression",
    "UnaryExpression",
    "Grouping",
    "IdentifierExpression",
    "IntegerLiteral",
    "FloatLiteral",
    "BooleanLiteral",
    "BinaryOperator",
    "UnaryOperator",
]
