"""
MiniPy Parser Test Suite
========================

Tests for the parser: statement structure, expression precedence, name
resolution against the symbol table, and error recovery.

Test Organization
-----------------
- TestStatements: Statement and block structure
- TestExpressions: Precedence and associativity
- TestNameResolution: Declaration on assignment, undefined uses
- TestErrorRecovery: Syntax errors and resynchronization
"""

from minipy.translator.ast import (
    ASTPrinter,
    Assignment,
    BinaryExpression,
    BinaryOperator,
    BreakStatement,
    FloatLiteral,
    IdentifierExpression,
    IfStatement,
    IntegerLiteral,
    WhileStatement,
)
from minipy.translator.context import TranslationContext
from minipy.translator.errors import (
    ExpressionTooDeepError,
    InvalidCharacterError,
    StrayIndentError,
    UndefinedVariableError,
    UnexpectedTokenError,
)
from minipy.translator.lexer import tokenize
from minipy.translator.parser import MAX_EXPRESSION_DEPTH, MiniPyParser, parse_source


# Declares the names used by expression tests
PRELUDE = "a = 1\nb = 2\nc = 3\nd = 4\n"


def parse(source: str):
    """Parse source and return (program, context)."""
    context = TranslationContext()
    program = parse_source(source, "test.mpy", context)
    return program, context


def parse_expr(text: str) -> str:
    """Parse 'r = <text>' after the prelude and return the printed expression."""
    program, context = parse(PRELUDE + f"r = {text}\n")
    assert not context.errors.has_errors(), context.errors.report()
    last_line = ASTPrinter().print(program).splitlines()[-1].strip()
    assert last_line.startswith("Assign: r = ")
    return last_line[len("Assign: r = "):]


def expr_errors(text: str) -> list:
    """Parse 'r = <text>' after the prelude and return the recorded errors."""
    _, context = parse(PRELUDE + f"r = {text}\n")
    return context.errors.errors


# =============================================================================
# Statements
# =============================================================================

class TestStatements:
    """Tests for statement parsing."""

    def test_empty_program(self):
        """Empty source should produce an empty program."""
        program, context = parse("")
        assert program.statements == []
        assert not context.errors.has_errors()

    def test_comments_only(self):
        """Comments and blank lines should produce an empty program."""
        program, context = parse("# nothing here\n\n   # still nothing\n")
        assert program.statements == []
        assert not context.errors.has_errors()

    def test_assignment(self):
        """Assignment should produce an Assignment node."""
        program, _ = parse("x = 1\n")
        assert len(program.statements) == 1
        stmt = program.statements[0]
        assert isinstance(stmt, Assignment)
        assert stmt.target == "x"
        assert stmt.value == IntegerLiteral(location=None, value=1)

    def test_float_assignment(self):
        """Float literals should keep their value."""
        program, _ = parse("x = 2.5\n")
        assert program.statements[0].value == FloatLiteral(location=None, value=2.5)

    def test_if_statement(self):
        """if should produce one branch and no else."""
        program, context = parse("x = 1\nif x > 0:\n    y = x + 2\n")
        assert not context.errors.has_errors()
        stmt = program.statements[1]
        assert isinstance(stmt, IfStatement)
        assert len(stmt.branches) == 1
        assert stmt.else_body is None
        branch = stmt.branches[0]
        assert isinstance(branch.condition, BinaryExpression)
        assert branch.condition.operator == BinaryOperator.GREATER
        assert [s.target for s in branch.body] == ["y"]

    def test_if_elif_else(self):
        """elif branches and else should attach to the same if."""
        source = (
            "x = 1\n"
            "if x < 0:\n"
            "    y = 0\n"
            "elif x == 0:\n"
            "    y = 1\n"
            "elif x == 1:\n"
            "    y = 2\n"
            "else:\n"
            "    y = 3\n"
        )
        program, context = parse(source)
        assert not context.errors.has_errors()
        assert len(program.statements) == 2
        stmt = program.statements[1]
        assert len(stmt.branches) == 3
        assert len(stmt.else_body) == 1

    def test_while_with_break(self):
        """while should contain its body, including break."""
        source = "x = 0\nwhile True:\n    x = x + 1\n    if x > 10:\n        break\n"
        program, context = parse(source)
        assert not context.errors.has_errors()
        loop = program.statements[1]
        assert isinstance(loop, WhileStatement)
        assert len(loop.body) == 2
        inner = loop.body[1]
        assert isinstance(inner, IfStatement)
        assert isinstance(inner.branches[0].body[0], BreakStatement)

    def test_nested_blocks_close_together(self):
        """Several blocks closing on one line should all end there."""
        source = "a = 1\nif a:\n  while a:\n    a = 0\nb = 2\n"
        program, context = parse(source)
        assert not context.errors.has_errors()
        assert [type(s) for s in program.statements] == [Assignment, IfStatement, Assignment]

    def test_ast_printer(self):
        """ASTPrinter should show the block structure."""
        program, _ = parse("x = 1\nwhile x < 5:\n    x = x + 1\n")
        assert ASTPrinter().print(program).splitlines() == [
            "Program",
            "  Assign: x = 1",
            "  While (x < 5)",
            "    Assign: x = (x + 1)",
        ]

    def test_parser_accepts_token_list(self):
        """MiniPyParser should accept a prepared token list."""
        tokens = tokenize("x = 1\ny = x\n", "test.mpy")
        parser = MiniPyParser(tokens, "test.mpy")
        program = parser.parse()
        assert len(program.statements) == 2
        assert parser.token_count == len(tokens)
        assert parser.context.symbols.names() == ["x", "y"]


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Tests for precedence and associativity."""

    def test_multiplication_binds_tighter(self):
        assert parse_expr("a + b * c") == "(a + (b * c))"

    def test_left_associative_subtraction(self):
        assert parse_expr("a - b - c") == "((a - b) - c)"

    def test_left_associative_division(self):
        assert parse_expr("a / b * c") == "((a / b) * c)"

    def test_parentheses_override_precedence(self):
        assert parse_expr("(a + b) * c") == "((a + b) * c)"

    def test_unary_minus_binds_tightest(self):
        """'-a * b' should be '(-a) * b'."""
        assert parse_expr("-a * b") == "((-a) * b)"

    def test_double_negation(self):
        assert parse_expr("- -a") == "(-(-a))"

    def test_not_binds_looser_than_comparison(self):
        """'not a == b' should be 'not (a == b)'."""
        assert parse_expr("not a == b") == "(not (a == b))"

    def test_not_binds_tighter_than_and(self):
        assert parse_expr("not a and b") == "((not a) and b)"

    def test_and_binds_tighter_than_or(self):
        assert parse_expr("a or b and c") == "(a or (b and c))"
        assert parse_expr("a and b or c") == "((a and b) or c)"

    def test_arithmetic_inside_comparison(self):
        assert parse_expr("a + 1 < b * 2") == "((a + 1) < (b * 2))"

    def test_comparisons_joined_by_logic(self):
        assert parse_expr("a < b and c >= d") == "((a < b) and (c >= d))"

    def test_not_inside_arithmetic_operand(self):
        """A prefix 'not' takes everything down to its own level."""
        assert parse_expr("a + not b == c") == "(a + (not (b == c)))"

    def test_literals(self):
        assert parse_expr("True and False") == "(True and False)"
        assert parse_expr("1.5 * 2") == "(1.5 * 2)"

    def test_grouped_comparison_may_be_compared(self):
        """Parentheses make a comparison an ordinary operand."""
        assert parse_expr("(a < b) < c") == "((a < b) < c)"

    def test_comparisons_do_not_chain(self):
        """'a < b < c' should be a syntax error."""
        errors = expr_errors("a < b < c")
        assert len(errors) == 1
        assert isinstance(errors[0], UnexpectedTokenError)

    def test_equality_does_not_chain(self):
        errors = expr_errors("a == b == c")
        assert len(errors) == 1
        assert isinstance(errors[0], UnexpectedTokenError)

    def test_long_chain(self):
        """A long flat sum should parse into a left-nested chain."""
        terms = 1000
        program, context = parse("x = " + " + ".join(["1"] * terms) + "\n")
        assert not context.errors.has_errors()
        printed = ASTPrinter().print(program).splitlines()[-1]
        assert printed.count("+") == terms - 1
        assert printed.count("(") == terms - 1
        assert printed.endswith("1) + 1) + 1)")


# =============================================================================
# Name Resolution
# =============================================================================

class TestNameResolution:
    """Tests for symbol declaration and undefined variable detection."""

    def test_assignment_declares_variable(self):
        _, context = parse("x = 1\n")
        assert context.symbols.names() == ["x"]

    def test_declaration_is_idempotent(self):
        """Assigning a variable twice should declare it once."""
        _, context = parse("x = 1\nx = 2\nx = x + 1\n")
        assert context.symbols.names() == ["x"]
        assert not context.errors.has_errors()

    def test_declaration_order(self):
        """Names should be declared in order of first assignment."""
        _, context = parse("b = 1\na = 2\nb = 3\nc = a\n")
        assert context.symbols.names() == ["b", "a", "c"]

    def test_use_before_assignment(self):
        """Using an unassigned variable should record exactly one error."""
        program, context = parse("y = x\n")
        assert context.error_count() == 1
        error = context.errors.errors[0]
        assert isinstance(error, UndefinedVariableError)
        assert error.name == "x"
        assert (error.location.line, error.location.column) == (1, 5)
        # Parsing continues with the bare name
        assert program.statements[0].value == IdentifierExpression(location=None, name="x")

    def test_location_of_first_declaration(self):
        """The table should remember where each name was first assigned."""
        _, context = parse("x = 1\nif x:\n    y = 2\nx = y\n")
        assert context.symbols.location_of("x").line == 1
        location = context.symbols.location_of("y")
        assert (location.line, location.column) == (3, 5)
        assert context.symbols.location_of("z") is None

    def test_self_reference_in_first_assignment(self):
        """The target is declared only after its statement is complete."""
        _, context = parse("x = x + 1\n")
        assert context.error_count() == 1
        assert context.errors.errors[0].name == "x"
        assert context.symbols.names() == ["x"]

    def test_each_undefined_use_is_reported(self):
        _, context = parse("y = p + q\nz = p\n")
        names = [e.name for e in context.errors.errors]
        assert names == ["p", "q", "p"]

    def test_assignment_in_block_is_global(self):
        """Variables assigned inside a block are visible after it."""
        _, context = parse("if True:\n    x = 1\ny = x\n")
        assert not context.errors.has_errors()
        assert context.symbols.names() == ["x", "y"]

    def test_undefined_in_condition(self):
        _, context = parse("while n > 0:\n    m = 1\n")
        assert context.error_count() == 1
        assert context.errors.errors[0].name == "n"

    def test_similar_name_hint(self):
        """An undefined name close to a declared one should get a hint."""
        _, context = parse("count = 1\ny = cuont\n")
        error = context.errors.errors[0]
        assert "count" in error.similar_names
        assert "did you mean 'count'" in str(error)

    def test_errors_in_stream_order(self):
        """Lexical and semantic errors should be recorded as encountered."""
        _, context = parse("y = a\n$\n")
        kinds = [type(e) for e in context.errors.errors]
        assert kinds == [UndefinedVariableError, InvalidCharacterError]


# =============================================================================
# Error Recovery
# =============================================================================

class TestErrorRecovery:
    """Tests for syntax error recording and resynchronization."""

    def test_recover_at_next_line(self):
        """A bad statement should be skipped and parsing resumed."""
        program, context = parse("x = = 1\ny = 2\n")
        assert context.error_count() == 1
        assert isinstance(context.errors.errors[0], UnexpectedTokenError)
        assert [s.target for s in program.statements] == ["y"]
        assert context.symbols.names() == ["y"]

    def test_error_message_names_token(self):
        _, context = parse("x = = 1\n")
        error = context.errors.errors[0]
        assert error.message == "syntax error at '='"
        assert error.hint == "expected expression"

    def test_recover_inside_block(self):
        """An error inside a block should not end the block."""
        source = "if True:\n    x = )\n    y = 1\nz = 2\n"
        program, context = parse(source)
        assert context.error_count() == 1
        stmt = program.statements[0]
        assert [s.target for s in stmt.branches[0].body] == ["y"]
        assert program.statements[1].target == "z"

    def test_recover_before_dedent(self):
        """An error on the last line of a block should leave the block closable."""
        source = "if True:\n    x = 1 +\ny = 2\n"
        program, context = parse(source)
        assert context.error_count() == 1
        assert isinstance(program.statements[0], IfStatement)
        assert program.statements[1].target == "y"

    def test_missing_colon(self):
        _, context = parse("while True\n    x = 1\n")
        first = context.errors.errors[0]
        assert isinstance(first, UnexpectedTokenError)
        assert first.hint == "expected ':'"

    def test_missing_block(self):
        """A header with no indented body should be a syntax error."""
        _, context = parse("if True:\nx = 1\n")
        assert context.error_count() == 1
        assert context.errors.errors[0].hint == "expected indented block"

    def test_stray_indent(self):
        """An unexpected indent should be recorded and its block discarded."""
        program, context = parse("x = 1\n    y = 2\nz = 3\n")
        assert context.error_count() == 1
        assert isinstance(context.errors.errors[0], StrayIndentError)
        assert [s.target for s in program.statements] == ["x", "z"]

    def test_errors_inside_stray_block_are_reported(self):
        _, context = parse("x = 1\n    y = q\n")
        kinds = [type(e) for e in context.errors.errors]
        assert kinds == [StrayIndentError, UndefinedVariableError]

    def test_line_of_invalid_characters(self):
        """A line holding only invalid characters should not cascade."""
        program, context = parse("$ ?\nx = 1\n")
        assert context.error_count() == 2
        assert all(isinstance(e, InvalidCharacterError) for e in context.errors.errors)
        assert [s.target for s in program.statements] == ["x"]

    def test_elif_without_if(self):
        _, context = parse("elif True:\n    x = 1\n")
        assert context.error_count() >= 1
        assert isinstance(context.errors.errors[0], UnexpectedTokenError)
        assert context.errors.errors[0].found == "'elif'"

    def test_many_errors_in_one_run(self):
        """Every independent error should be reported."""
        source = "a = = 1\nb = 2 $\nc = d\ne = (1\n"
        _, context = parse(source)
        assert context.error_count() == 4

    def test_deep_parentheses_are_recorded(self):
        """Too many nested parentheses should be a recorded error, not a crash."""
        depth = MAX_EXPRESSION_DEPTH + 10
        source = "x = " + "(" * depth + "1" + ")" * depth + "\ny = 2\n"
        program, context = parse(source)
        assert context.error_count() == 1
        error = context.errors.errors[0]
        assert isinstance(error, ExpressionTooDeepError)
        assert error.location.column == 5 + MAX_EXPRESSION_DEPTH
        assert [s.target for s in program.statements] == ["y"]

    def test_deep_prefix_operators_are_recorded(self):
        program, context = parse("a = 1\nx = " + "not " * 200 + "a\n")
        assert [type(e) for e in context.errors.errors] == [ExpressionTooDeepError]
        assert [s.target for s in program.statements] == ["a"]

    def test_nesting_at_limit_is_accepted(self):
        depth = MAX_EXPRESSION_DEPTH
        _, context = parse("x = " + "-(" * (depth // 2) + "1" + ")" * (depth // 2) + "\n")
        assert not context.errors.has_errors()

    def test_nesting_depth_resets_after_error(self):
        """A failed deep expression should not count against later lines."""
        depth = MAX_EXPRESSION_DEPTH + 1
        source = "x = " + "(" * depth + "\n" + "y = " + "(" * 40 + "2" + ")" * 40 + "\n"
        program, context = parse(source)
        assert context.error_count() == 1
        assert [s.target for s in program.statements] == ["y"]
