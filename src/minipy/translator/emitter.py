"""
C Emitter for MiniPy
====================

This module renders a parsed MiniPy program as a complete C program.
It runs only after a translation finished without errors, and is a pure
function of the syntax tree and the final symbol table.

Output Layout
-------------
    #include <stdio.h>
    int main() {
    double x;                       one per variable, declaration order
    double y;

    /* Begin program */

    x = 1;                          translated body
    if (x > 0) {
        y = x + 2;
    }
    /* End program */

    printf("x: %lf\\n", x);          one per variable, declaration order
    printf("y: %lf\\n", y);
    }

Every MiniPy variable becomes a double; integers and booleans are
written as integer constants and converted by C.

Translation Rules
-----------------
| MiniPy              | C                              |
|---------------------|--------------------------------|
| x = e               | x = e;                         |
| if/elif/else        | if (..) { } else if (..) { } else { } |
| while c:            | while (c) { }                  |
| break               | break;                         |
| and / or / not      | && / \\|\\| / !                   |
| True / False        | 1 / 0                          |
| (e)                 | (e)                            |

'not' applied to a binary expression renders as '!(...)', since C's '!'
binds tighter than the MiniPy 'not'.
"""

from minipy.translator.ast import (
    ASTVisitor,
    ProgramNode,
    Statement,
    Assignment,
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
from minipy.translator.symbols import SymbolTable


C_BINARY_OPERATORS: dict[BinaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
    BinaryOperator.LESS: "<",
    BinaryOperator.GREATER: ">",
    BinaryOperator.LESS_EQ: "<=",
    BinaryOperator.GREATER_EQ: ">=",
    BinaryOperator.LOGICAL_AND: "&&",
    BinaryOperator.LOGICAL_OR: "||",
}


class CEmitter(ASTVisitor):
    """
    Renders a MiniPy syntax tree as C source text.

    Statement visitors return lists of lines; expression visitors return
    a single string.

    Usage:
        emitter = CEmitter()
        c_source = emitter.emit(program, context.symbols)
    """

    INDENT = "    "

    PREAMBLE = [
        "#include <stdio.h>",
        "int main() {",
    ]

    def emit(self, program: ProgramNode, symbols: SymbolTable) -> str:
        """
        Produce the complete C program.

        Args:
            program: Root of the parsed tree
            symbols: Final symbol table of the translation

        Returns:
            C source text ending with a newline
        """
        lines = list(self.PREAMBLE)

        for name in symbols:
            lines.append(f"double {name};")

        lines.append("")
        lines.append("/* Begin program */")
        lines.append("")
        lines.extend(self.render_statements(program.statements))
        lines.append("/* End program */")
        lines.append("")

        for name in symbols:
            lines.append(f'printf("{name}: %lf\\n", {name});')

        lines.append("}")
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Statements
    # =========================================================================

    def render_statements(self, statements: list[Statement], depth: int = 0) -> list[str]:
        """Render statements in order, indented to the given block depth."""
        indent = self.INDENT * depth
        lines = []
        for stmt in statements:
            lines.extend(indent + line for line in self.visit(stmt))
        return lines

    def _render_block(self, statements: list[Statement]) -> list[str]:
        return self.render_statements(statements, depth=1)

    def visit_Assignment(self, node: Assignment) -> list[str]:
        return [f"{node.target} = {self.render_expression(node.value)};"]

    def visit_IfStatement(self, node: IfStatement) -> list[str]:
        lines = []
        for index, branch in enumerate(node.branches):
            condition = self.render_expression(branch.condition)
            if index == 0:
                lines.append(f"if ({condition}) {{")
            else:
                lines.append(f"}} else if ({condition}) {{")
            lines.extend(self._render_block(branch.body))

        if node.else_body is not None:
            lines.append("} else {")
            lines.extend(self._render_block(node.else_body))

        lines.append("}")
        return lines

    def visit_WhileStatement(self, node: WhileStatement) -> list[str]:
        condition = self.render_expression(node.condition)
        return [
            f"while ({condition}) {{",
            *self._render_block(node.body),
            "}",
        ]

    def visit_BreakStatement(self, node: BreakStatement) -> list[str]:
        return ["break;"]

    # =========================================================================
    # Expressions
    # =========================================================================

    def render_expression(self, expr: Expression) -> str:
        """Render an expression as C text."""
        return self.visit(expr)

    def visit_BinaryExpression(self, node: BinaryExpression) -> str:
        # Long chains such as 'a + b + ... + z' nest on the left; walk that
        # spine iteratively so their length is not bounded by the stack
        parts = []
        expr: Expression = node
        while isinstance(expr, BinaryExpression):
            right = self.render_expression(expr.right)
            parts.append(f"{C_BINARY_OPERATORS[expr.operator]} {right}")
            expr = expr.left
        parts.append(self.render_expression(expr))
        return " ".join(reversed(parts))

    def visit_UnaryExpression(self, node: UnaryExpression) -> str:
        operand = self.render_expression(node.operand)

        if node.operator == UnaryOperator.LOGICAL_NOT:
            if isinstance(node.operand, BinaryExpression):
                return f"!({operand})"
            return f"!{operand}"

        # Keep '- -x' from turning into the C decrement operator
        if operand.startswith("-"):
            return f"-({operand})"
        return f"-{operand}"

    def visit_Grouping(self, node: Grouping) -> str:
        return f"({self.render_expression(node.expression)})"

    def visit_IdentifierExpression(self, node: IdentifierExpression) -> str:
        return node.name

    def visit_IntegerLiteral(self, node: IntegerLiteral) -> str:
        return str(node.value)

    def visit_FloatLiteral(self, node: FloatLiteral) -> str:
        # Shortest text that round-trips, e.g. 0.1, 2.5, 1e-05
        return repr(node.value)

    def visit_BooleanLiteral(self, node: BooleanLiteral) -> str:
        return "1" if node.value else "0"


def emit_c(program: ProgramNode, symbols: SymbolTable) -> str:
    """Render a program with a fresh CEmitter."""
    return CEmitter().emit(program, symbols)
