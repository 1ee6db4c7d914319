"""
MiniPy Parser
=============

This module implements the parser for MiniPy. It pulls tokens from the
lexer one at a time (a single token of lookahead is enough for the whole
grammar) and builds the syntax tree, resolving variable names against
the symbol table as it goes.

Grammar
-------
program         ::= statement*
block           ::= INDENT statement* DEDENT
statement       ::= assign_stmt | if_stmt | while_stmt | break_stmt
assign_stmt     ::= IDENTIFIER '=' expr NEWLINE
if_stmt         ::= 'if' expr ':' NEWLINE block
                    ('elif' expr ':' NEWLINE block)*
                    ('else' ':' NEWLINE block)?
while_stmt      ::= 'while' expr ':' NEWLINE block
break_stmt      ::= 'break' NEWLINE

expr            ::= expr 'or' expr | expr 'and' expr | 'not' expr
                  | expr ('=='|'!='|'>'|'>='|'<'|'<=') expr
                  | expr ('+'|'-') expr | expr ('*'|'/') expr
                  | '-' expr | '(' expr ')'
                  | INTEGER | FLOAT | BOOLEAN | IDENTIFIER

Expression Precedence (lowest to highest)
-----------------------------------------
1. or                       left-associative
2. and                      left-associative
3. not                      prefix
4. == != > >= < <=          non-associative ('a < b < c' is an error)
5. + -                      left-associative
6. * /                      left-associative
7. unary -                  prefix

Prefix operators parse their operand at their own precedence level, so
'not a == b' is 'not (a == b)' and '-a * b' is '(-a) * b'.

Name Resolution
---------------
Resolution follows source order, exactly as a single-pass translator
would see it:

- an assignment target is declared once its whole statement (including
  the NEWLINE) has been parsed, so 'x = x + 1' with no earlier 'x'
  reports 'x' as undefined;
- an identifier used in an expression before any assignment to it is
  recorded as an UndefinedVariableError, and parsing carries on with
  the bare name.

Error Recovery
--------------
A syntax error is recorded and the parser skips tokens up to and
including the next NEWLINE of the current block, then resumes at the
next statement. An INDENT where a statement was expected is recorded as
a StrayIndentError; the indented block is still parsed (so errors inside
it are found) and then discarded.

More than MAX_EXPRESSION_DEPTH nested parentheses or prefix operators
in one expression is recorded as an ExpressionTooDeepError, and the
statement is skipped like any other syntax error.

Example Usage
-------------
>>> from minipy.translator.parser import parse_source
>>> program = parse_source('x = 1\\nwhile x < 10:\\n    x = x * 2\\n')
>>> len(program.statements)
2
"""

import logging
from typing import Iterable, Iterator, Optional

from minipy.errors import SourceLocation
from minipy.translator.context import TranslationContext
from minipy.translator.lexer import IndentLexer, Token, TokenType, split_source_lines
from minipy.translator.ast import (
    ProgramNode,
    Statement,
    Assignment,
    ConditionalBranch,
    IfStatement,
    WhileStatement,
    BreakStatement,
    Expression,
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
from minipy.translator.errors import (
    ParseError,
    UnexpectedTokenError,
    StrayIndentError,
    ExpressionTooDeepError,
    UndefinedVariableError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Operator Tables
# =============================================================================

PREC_OR = 1
PREC_AND = 2
PREC_NOT = 3
PREC_COMPARISON = 4
PREC_ADDITIVE = 5
PREC_MULTIPLICATIVE = 6
PREC_UNARY_MINUS = 7

# Limit on nested parentheses and prefix operators within one expression
MAX_EXPRESSION_DEPTH = 50

# Binary operators: token type -> (precedence, operator)
BINARY_OPERATORS: dict[TokenType, tuple[int, BinaryOperator]] = {
    TokenType.OR: (PREC_OR, BinaryOperator.LOGICAL_OR),
    TokenType.AND: (PREC_AND, BinaryOperator.LOGICAL_AND),
    TokenType.EQ: (PREC_COMPARISON, BinaryOperator.EQUAL),
    TokenType.NE: (PREC_COMPARISON, BinaryOperator.NOT_EQUAL),
    TokenType.GT: (PREC_COMPARISON, BinaryOperator.GREATER),
    TokenType.GE: (PREC_COMPARISON, BinaryOperator.GREATER_EQ),
    TokenType.LT: (PREC_COMPARISON, BinaryOperator.LESS),
    TokenType.LE: (PREC_COMPARISON, BinaryOperator.LESS_EQ),
    TokenType.PLUS: (PREC_ADDITIVE, BinaryOperator.ADD),
    TokenType.MINUS: (PREC_ADDITIVE, BinaryOperator.SUBTRACT),
    TokenType.STAR: (PREC_MULTIPLICATIVE, BinaryOperator.MULTIPLY),
    TokenType.SLASH: (PREC_MULTIPLICATIVE, BinaryOperator.DIVIDE),
}

# Prefix operators: token type -> (operand precedence, operator)
PREFIX_OPERATORS: dict[TokenType, tuple[int, UnaryOperator]] = {
    TokenType.NOT: (PREC_NOT, UnaryOperator.LOGICAL_NOT),
    TokenType.MINUS: (PREC_UNARY_MINUS, UnaryOperator.NEGATE),
}


class MiniPyParser:
    """
    Single-lookahead parser for MiniPy.

    Syntax and name errors are recorded in the translation context rather
    than raised, so one run reports every problem it can find. The only
    exception that escapes parse() is the lexer's fatal
    IndentationOverflowError.

    Attributes:
        filename: Source filename for error reporting
        context: Shared translation state (symbol table and errors)
        source_lines: Source text lines for error context
        token_count: Number of tokens pulled from the lexer so far
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        context: Optional[TranslationContext] = None,
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token stream; usually a lexer's tokenize() generator,
                    which is pulled lazily as parsing proceeds
            filename: Source filename for error messages
            context: Translation state shared with the lexer
            source_lines: Source text lines for error context
        """
        self._tokens: Iterator[Token] = iter(tokens)
        self.filename = filename
        self.context = context if context is not None else TranslationContext()
        self.source_lines = source_lines or []
        self.token_count = 0

        self._current: Optional[Token] = None
        self._expression_depth = 0

    def parse(self) -> ProgramNode:
        """
        Parse the whole token stream.

        Returns:
            ProgramNode with the top-level statements

        Raises:
            IndentationOverflowError: Propagated from the lexer
        """
        self._current = self._next_token()
        statements = []

        while not self._check(TokenType.EOF):
            if self._check(TokenType.DEDENT):
                # Only reachable with a hand-built, unbalanced token list
                token = self._advance()
                self.context.errors.add(UnexpectedTokenError(
                    token.describe(),
                    location=token.location,
                    source_line=self._get_source_line(token.line),
                ))
                continue

            stmt = self._parse_statement_safely()
            if stmt is not None:
                statements.append(stmt)

        logger.debug(
            "Parsed %d top-level statements from %d tokens, %d errors",
            len(statements), self.token_count, self.context.error_count(),
        )
        return ProgramNode(
            location=SourceLocation(self.filename, 1, 1),
            statements=statements,
        )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _next_token(self) -> Token:
        """Pull the next token from the stream, repeating EOF once exhausted."""
        try:
            token = next(self._tokens)
        except StopIteration:
            line = self._current.line if self._current else 1
            return Token(TokenType.EOF, None, line, 1, self.filename)
        self.token_count += 1
        return token

    def _peek(self) -> Token:
        return self._current

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        if token.type != TokenType.EOF:
            self._current = self._next_token()
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        """Consume the current token if it matches one of the types."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, description: str) -> Token:
        """
        Expect and consume a specific token type.

        Raises:
            UnexpectedTokenError: If the current token is of another type
        """
        if self._check(token_type):
            return self._advance()
        raise self._unexpected(description)

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        token = self._peek()
        return UnexpectedTokenError(
            token.describe(),
            expected=expected,
            location=token.location,
            source_line=self._get_source_line(token.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _synchronize(self) -> None:
        """
        Skip to the next statement boundary after a syntax error.

        Discards tokens up to and including the next NEWLINE. A DEDENT
        that closes the current block, or EOF, stops the skip without
        being consumed. Nested INDENT/DEDENT regions are skipped whole.
        """
        depth = 0
        skipped = 0

        while not self._check(TokenType.EOF):
            if self._check(TokenType.DEDENT):
                if depth == 0:
                    break
                depth -= 1
                self._advance()
                skipped += 1
                if depth == 0:
                    break
                continue

            if self._check(TokenType.INDENT):
                depth += 1
            elif self._check(TokenType.NEWLINE) and depth == 0:
                self._advance()
                skipped += 1
                break

            self._advance()
            skipped += 1

        logger.debug("Error recovery skipped %d tokens", skipped)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement_safely(self) -> Optional[Statement]:
        """Parse one statement, recording and recovering from syntax errors."""
        try:
            return self._parse_statement()
        except ParseError as e:
            self.context.errors.add(e)
            self._synchronize()
            return None

    def _parse_statement_list(self) -> list[Statement]:
        """Parse statements until the DEDENT closing the current block."""
        statements = []
        while not self._check(TokenType.DEDENT, TokenType.EOF):
            stmt = self._parse_statement_safely()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def _parse_statement(self) -> Optional[Statement]:
        """Parse any statement."""
        token = self._peek()

        if token.type == TokenType.IDENTIFIER:
            return self._parse_assignment()
        if token.type == TokenType.IF:
            return self._parse_if_statement()
        if token.type == TokenType.WHILE:
            return self._parse_while_statement()
        if token.type == TokenType.BREAK:
            return self._parse_break_statement()
        if token.type == TokenType.INDENT:
            return self._parse_stray_block()
        if token.type == TokenType.NEWLINE:
            # The line held nothing but unrecognized characters
            self._advance()
            return None

        raise self._unexpected("statement")

    def _parse_block(self) -> list[Statement]:
        """Parse an indented block: INDENT statement* DEDENT."""
        self._expect(TokenType.INDENT, "indented block")
        statements = self._parse_statement_list()
        self._expect(TokenType.DEDENT, "end of block")
        return statements

    def _parse_stray_block(self) -> None:
        """Record an unexpected indent, then parse and discard its block."""
        token = self._peek()
        self.context.errors.add(StrayIndentError(
            token.location,
            self._get_source_line(token.line),
        ))
        self._parse_block()
        return None

    def _parse_assignment(self) -> Assignment:
        """Parse NAME = expr NEWLINE and declare NAME."""
        name_token = self._advance()
        self._expect(TokenType.ASSIGN, "'='")
        value = self._parse_expression()
        self._expect(TokenType.NEWLINE, "end of line")

        self.context.symbols.declare(name_token.value, name_token.location)

        return Assignment(
            location=name_token.location,
            target=name_token.value,
            value=value,
        )

    def _parse_conditional_branch(self) -> ConditionalBranch:
        """Parse 'expr : NEWLINE block' after an 'if' or 'elif' keyword."""
        location = self._peek().location
        condition = self._parse_expression()
        self._expect(TokenType.COLON, "':'")
        self._expect(TokenType.NEWLINE, "end of line")
        body = self._parse_block()
        return ConditionalBranch(location=location, condition=condition, body=body)

    def _parse_if_statement(self) -> IfStatement:
        """Parse an if / elif / else chain."""
        location = self._advance().location
        branches = [self._parse_conditional_branch()]

        while self._match(TokenType.ELIF):
            branches.append(self._parse_conditional_branch())

        else_body = None
        if self._match(TokenType.ELSE):
            self._expect(TokenType.COLON, "':'")
            self._expect(TokenType.NEWLINE, "end of line")
            else_body = self._parse_block()

        return IfStatement(location=location, branches=branches, else_body=else_body)

    def _parse_while_statement(self) -> WhileStatement:
        """Parse while statement."""
        location = self._advance().location
        condition = self._parse_expression()
        self._expect(TokenType.COLON, "':'")
        self._expect(TokenType.NEWLINE, "end of line")
        body = self._parse_block()
        return WhileStatement(location=location, condition=condition, body=body)

    def _parse_break_statement(self) -> BreakStatement:
        """Parse break statement."""
        location = self._advance().location
        self._expect(TokenType.NEWLINE, "end of line")
        return BreakStatement(location=location)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self, min_precedence: int = PREC_OR) -> Expression:
        """
        Parse an expression whose binary operators bind at least as
        tightly as min_precedence (precedence climbing).
        """
        expr = self._parse_prefix()

        while self._peek().type in BINARY_OPERATORS:
            precedence, operator = BINARY_OPERATORS[self._peek().type]
            if precedence < min_precedence:
                break

            self._advance()
            right = self._parse_expression(precedence + 1)
            expr = BinaryExpression(
                location=expr.location,
                operator=operator,
                left=expr,
                right=right,
            )

            # Comparisons do not chain
            if precedence == PREC_COMPARISON and self._is_comparison(self._peek()):
                raise self._unexpected("end of comparison (comparisons do not chain)")

        return expr

    @staticmethod
    def _is_comparison(token: Token) -> bool:
        entry = BINARY_OPERATORS.get(token.type)
        return entry is not None and entry[0] == PREC_COMPARISON

    def _parse_prefix(self) -> Expression:
        """Parse 'not' and unary minus, or fall through to a primary."""
        token = self._peek()

        if token.type in PREFIX_OPERATORS:
            precedence, operator = PREFIX_OPERATORS[token.type]
            self._advance()
            self._enter_nested(token)
            try:
                operand = self._parse_expression(precedence)
            finally:
                self._expression_depth -= 1
            return UnaryExpression(
                location=token.location,
                operator=operator,
                operand=operand,
            )

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse literals, identifiers and parenthesized expressions."""
        token = self._peek()

        if token.type == TokenType.INTEGER:
            self._advance()
            return IntegerLiteral(location=token.location, value=token.value)

        if token.type == TokenType.FLOAT:
            self._advance()
            return FloatLiteral(location=token.location, value=token.value)

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return BooleanLiteral(location=token.location, value=token.value)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            self._resolve(token)
            return IdentifierExpression(location=token.location, name=token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            self._enter_nested(token)
            try:
                inner = self._parse_expression()
                self._expect(TokenType.RPAREN, "')'")
            finally:
                self._expression_depth -= 1
            return Grouping(location=token.location, expression=inner)

        raise self._unexpected("expression")

    def _enter_nested(self, token: Token) -> None:
        """
        Count one level of parentheses or prefix operators.

        Raises:
            ExpressionTooDeepError: If MAX_EXPRESSION_DEPTH levels are open
        """
        if self._expression_depth >= MAX_EXPRESSION_DEPTH:
            raise ExpressionTooDeepError(
                MAX_EXPRESSION_DEPTH,
                location=token.location,
                source_line=self._get_source_line(token.line),
            )
        self._expression_depth += 1

    def _resolve(self, token: Token) -> None:
        """Record an error if an identifier has not been assigned yet."""
        name = token.value
        if self.context.symbols.is_declared(name):
            return

        self.context.errors.add(UndefinedVariableError(
            name,
            token.location,
            self._get_source_line(token.line),
            similar_names=self.context.symbols.find_similar(name),
        ))


def parse_source(
    source: str,
    filename: str = "<input>",
    context: Optional[TranslationContext] = None,
) -> ProgramNode:
    """
    Lex and parse source text in one call.

    Errors are recorded in the given context (a fresh one when omitted).
    """
    context = context if context is not None else TranslationContext()
    lexer = IndentLexer(source, filename, context)
    parser = MiniPyParser(lexer.tokenize(), filename, context, split_source_lines(source))
    return parser.parse()
