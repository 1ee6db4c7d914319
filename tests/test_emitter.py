"""
MiniPy C Emitter Test Suite
===========================

Tests for rendering syntax trees and symbol tables as C source.
"""

from minipy.translator.ast import (
    BinaryExpression,
    BinaryOperator,
    BooleanLiteral,
    FloatLiteral,
    Grouping,
    IdentifierExpression,
    IntegerLiteral,
    ProgramNode,
    UnaryExpression,
    UnaryOperator,
)
from minipy.translator.context import TranslationContext
from minipy.translator.emitter import CEmitter, emit_c
from minipy.translator.parser import parse_source
from minipy.translator.symbols import SymbolTable


def emit(source: str) -> str:
    """Parse source (which must be error free) and emit C."""
    context = TranslationContext()
    program = parse_source(source, "test.mpy", context)
    assert not context.errors.has_errors(), context.errors.report()
    return CEmitter().emit(program, context.symbols)


def body_lines(c_source: str) -> list[str]:
    """Return the lines between the begin and end markers."""
    lines = c_source.splitlines()
    start = lines.index("/* Begin program */") + 2
    end = lines.index("/* End program */")
    return lines[start:end]


def render(source_expr: str) -> str:
    """Emit 'r = <expr>' with a, b, c declared and return the C expression."""
    lines = body_lines(emit(f"a = 1\nb = 2\nc = 3\nr = {source_expr}\n"))
    assert lines[-1].startswith("r = ") and lines[-1].endswith(";")
    return lines[-1][len("r = "):-1]


def name(text: str) -> IdentifierExpression:
    return IdentifierExpression(location=None, name=text)


# =============================================================================
# Program Layout
# =============================================================================

class TestProgramLayout:
    """Tests for the fixed C program layout."""

    def test_full_program(self):
        """A translated program should have the complete layout."""
        c_source = emit("x = 1\nif x > 0:\n    y = x + 2\n")
        assert c_source == (
            "#include <stdio.h>\n"
            "int main() {\n"
            "double x;\n"
            "double y;\n"
            "\n"
            "/* Begin program */\n"
            "\n"
            "x = 1;\n"
            "if (x > 0) {\n"
            "    y = x + 2;\n"
            "}\n"
            "/* End program */\n"
            "\n"
            'printf("x: %lf\\n", x);\n'
            'printf("y: %lf\\n", y);\n'
            "}\n"
        )

    def test_empty_program(self):
        """An empty program should have no declarations and an empty body."""
        c_source = emit("# only a comment\n")
        assert c_source == (
            "#include <stdio.h>\n"
            "int main() {\n"
            "\n"
            "/* Begin program */\n"
            "\n"
            "/* End program */\n"
            "\n"
            "}\n"
        )
        assert "double" not in c_source

    def test_one_declaration_per_variable(self):
        """Repeated assignments should produce a single declaration."""
        c_source = emit("x = 1\nx = 2\ny = x\nx = y\n")
        lines = c_source.splitlines()
        assert [l for l in lines if l.startswith("double ")] == ["double x;", "double y;"]
        assert [l for l in lines if l.startswith("printf")] == [
            'printf("x: %lf\\n", x);',
            'printf("y: %lf\\n", y);',
        ]

    def test_declaration_order(self):
        """Declarations should follow first assignment order."""
        c_source = emit("zeta = 1\nalpha = 2\n")
        assert c_source.index("double zeta;") < c_source.index("double alpha;")

    def test_emit_with_manual_symbol_table(self):
        """The emitter depends only on the tree and the table."""
        table = SymbolTable()
        table.declare("total")
        c_source = emit_c(ProgramNode(location=None, statements=[]), table)
        assert "double total;\n" in c_source
        assert 'printf("total: %lf\\n", total);' in c_source


# =============================================================================
# Statements
# =============================================================================

class TestStatements:
    """Tests for statement rendering."""

    def test_if_elif_else(self):
        source = (
            "x = 1\n"
            "if x < 0:\n"
            "    y = 0\n"
            "elif x == 0:\n"
            "    y = 1\n"
            "else:\n"
            "    y = 2\n"
        )
        assert body_lines(emit(source)) == [
            "x = 1;",
            "if (x < 0) {",
            "    y = 0;",
            "} else if (x == 0) {",
            "    y = 1;",
            "} else {",
            "    y = 2;",
            "}",
        ]

    def test_while_and_break(self):
        source = (
            "i = 0\n"
            "while True:\n"
            "    i = i + 1\n"
            "    if i >= 10:\n"
            "        break\n"
        )
        assert body_lines(emit(source)) == [
            "i = 0;",
            "while (1) {",
            "    i = i + 1;",
            "    if (i >= 10) {",
            "        break;",
            "    }",
            "}",
        ]

    def test_break_outside_loop_is_verbatim(self):
        """break is not checked against loop nesting."""
        assert body_lines(emit("x = 1\nbreak\n")) == ["x = 1;", "break;"]

    def test_statement_after_nested_blocks(self):
        source = "a = 1\nif a:\n    while a:\n        a = 0\nb = a\n"
        assert body_lines(emit(source)) == [
            "a = 1;",
            "if (a) {",
            "    while (a) {",
            "        a = 0;",
            "    }",
            "}",
            "b = a;",
        ]


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Tests for expression rendering."""

    def test_arithmetic(self):
        assert render("a + b * c - 1") == "a + b * c - 1"

    def test_grouping_is_kept(self):
        assert render("(a + b) * c") == "(a + b) * c"

    def test_logical_operators(self):
        assert render("a and b or c") == "a && b || c"

    def test_not_on_name(self):
        assert render("not a") == "!a"

    def test_not_on_comparison_is_parenthesized(self):
        """C's '!' binds tighter than 'not', so its operand needs parentheses."""
        assert render("not a == b") == "!(a == b)"

    def test_not_inside_arithmetic(self):
        assert render("a + not b == c") == "a + !(b == c)"

    def test_unary_minus(self):
        assert render("-a * b") == "-a * b"

    def test_double_negation_avoids_decrement(self):
        """'- -a' must not become the C '--' operator."""
        assert render("- -a") == "-(-a)"

    def test_booleans(self):
        assert render("True") == "1"
        assert render("False") == "0"

    def test_numbers(self):
        assert render("42") == "42"
        assert render("2.5") == "2.5"
        assert render(".5") == "0.5"

    def test_comparisons(self):
        assert render("a != b") == "a != b"
        assert render("a <= b") == "a <= b"

    def test_render_expression_directly(self):
        """Expression nodes can be rendered without a program."""
        expr = BinaryExpression(
            location=None,
            operator=BinaryOperator.LOGICAL_OR,
            left=UnaryExpression(
                location=None,
                operator=UnaryOperator.LOGICAL_NOT,
                operand=BooleanLiteral(location=None, value=0),
            ),
            right=Grouping(
                location=None,
                expression=BinaryExpression(
                    location=None,
                    operator=BinaryOperator.DIVIDE,
                    left=name("x"),
                    right=FloatLiteral(location=None, value=0.25),
                ),
            ),
        )
        assert CEmitter().render_expression(expr) == "!0 || (x / 0.25)"

    def test_negated_literal(self):
        expr = UnaryExpression(
            location=None,
            operator=UnaryOperator.NEGATE,
            operand=IntegerLiteral(location=None, value=3),
        )
        assert CEmitter().render_expression(expr) == "-3"

    def test_long_sum(self):
        """A sum of many terms should render flat without exhausting the stack."""
        terms = 1500
        assert render(" + ".join(["a"] * terms)) == " + ".join(["a"] * terms)

    def test_long_mixed_chain(self):
        source = " - ".join(["a * b + c"] * 400)
        assert render(source) == source
