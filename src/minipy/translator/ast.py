"""
MiniPy Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the syntax nodes produced by the MiniPy parser.
Every grammar construct produces exactly one node, and each node owns
its children. The emitter later renders each node to one fragment of C.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node holding the top-level statements
├── ConditionalBranch - one 'if'/'elif' condition with its body
├── Statements
│   ├── Assignment - NAME = expr
│   ├── IfStatement - if / elif / else chain
│   ├── WhileStatement - while loop
│   └── BreakStatement - break
└── Expressions
    ├── BinaryExpression - arithmetic, comparison and logical operators
    ├── UnaryExpression - 'not' and unary minus
    ├── Grouping - parenthesized sub-expression, kept verbatim
    ├── IdentifierExpression - variable reference
    ├── IntegerLiteral - 123
    ├── FloatLiteral - 1.5
    └── BooleanLiteral - True / False

Design Notes
------------
- All nodes are dataclasses.
- Source locations are excluded from equality, so two trees parsed
  from differently laid out sources compare equal when their structure
  matches.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from minipy.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation = field(compare=False)


@dataclass
class Expression(ASTNode):
    """Base class for nodes that evaluate to a value."""
    pass


@dataclass
class Statement(ASTNode):
    """Base class for nodes that perform an action."""
    pass


# =============================================================================
# Operators
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    # Arithmetic
    ADD = auto()        # +
    SUBTRACT = auto()   # -
    MULTIPLY = auto()   # *
    DIVIDE = auto()     # /

    # Comparison
    EQUAL = auto()      # ==
    NOT_EQUAL = auto()  # !=
    LESS = auto()       # <
    GREATER = auto()    # >
    LESS_EQ = auto()    # <=
    GREATER_EQ = auto() # >=

    # Logical
    LOGICAL_AND = auto()  # and
    LOGICAL_OR = auto()   # or


class UnaryOperator(Enum):
    """Unary operator types."""
    NEGATE = auto()       # -x
    LOGICAL_NOT = auto()  # not x


# =============================================================================
# Program and Statements
# =============================================================================

@dataclass
class ProgramNode(ASTNode):
    """
    Root of the tree.

    Attributes:
        statements: Top-level statements in source order
    """
    statements: list[Statement] = field(default_factory=list)


@dataclass
class Assignment(Statement):
    """
    Assignment statement (NAME = expr).

    Attributes:
        target: Name of the assigned variable
        value: The assigned expression
    """
    target: str = ""
    value: Optional[Expression] = None


@dataclass
class ConditionalBranch(ASTNode):
    """
    One guarded block of an if statement.

    Attributes:
        condition: The guard expression
        body: Statements run when the guard holds
    """
    condition: Optional[Expression] = None
    body: list[Statement] = field(default_factory=list)


@dataclass
class IfStatement(Statement):
    """
    if / elif / else chain.

    Attributes:
        branches: The 'if' branch followed by each 'elif' branch
        else_body: Statements of the 'else' block, or None without one
    """
    branches: list[ConditionalBranch] = field(default_factory=list)
    else_body: Optional[list[Statement]] = None


@dataclass
class WhileStatement(Statement):
    """
    while loop.

    Attributes:
        condition: Loop condition
        body: Loop body statements
    """
    condition: Optional[Expression] = None
    body: list[Statement] = field(default_factory=list)


@dataclass
class BreakStatement(Statement):
    """break statement."""
    pass


# =============================================================================
# Expressions
# =============================================================================

@dataclass
class BinaryExpression(Expression):
    """
    Binary operation (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand
        right: Right operand
    """
    operator: Optional[BinaryOperator] = None
    left: Optional[Expression] = None
    right: Optional[Expression] = None


@dataclass
class UnaryExpression(Expression):
    """
    Prefix operation (op operand).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: Optional[UnaryOperator] = None
    operand: Optional[Expression] = None


@dataclass
class Grouping(Expression):
    """Parenthesized expression, rendered with its parentheses."""
    expression: Optional[Expression] = None


@dataclass
class IdentifierExpression(Expression):
    """Reference to a variable."""
    name: str = ""


@dataclass
class IntegerLiteral(Expression):
    """Integer constant."""
    value: int = 0


@dataclass
class FloatLiteral(Expression):
    """Floating-point constant."""
    value: float = 0.0


@dataclass
class BooleanLiteral(Expression):
    """True or False, carried as 1 or 0."""
    value: int = 0


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses define visit_<ClassName> methods for the node types they
    handle. Nodes without a specific method go to generic_visit, which
    visits every child node.

    Example:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_IdentifierExpression(self, node):
                self.names.append(node.name)
    """

    def visit(self, node: ASTNode) -> Any:
        """Visit a node by dispatching to the appropriate method."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all children of the node."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

SOURCE_OPERATORS: dict[Enum, str] = {
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
    BinaryOperator.LOGICAL_AND: "and",
    BinaryOperator.LOGICAL_OR: "or",
    UnaryOperator.NEGATE: "-",
    UnaryOperator.LOGICAL_NOT: "not ",
}


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Expressions are shown fully parenthesized in source syntax so that
    the parsed precedence is visible.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _visit_block(self, statements: list[Statement]) -> None:
        self.indent_level += 1
        for stmt in statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self._visit_block(node.statements)

    def visit_Assignment(self, node: Assignment):
        self._emit(f"Assign: {node.target} = {self._expr_str(node.value)}")

    def visit_IfStatement(self, node: IfStatement):
        for index, branch in enumerate(node.branches):
            keyword = "If" if index == 0 else "Elif"
            self._emit(f"{keyword} {self._expr_str(branch.condition)}")
            self._visit_block(branch.body)
        if node.else_body is not None:
            self._emit("Else")
            self._visit_block(node.else_body)

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit(f"While {self._expr_str(node.condition)}")
        self._visit_block(node.body)

    def visit_BreakStatement(self, node: BreakStatement):
        self._emit("Break")

    def _expr_str(self, expr: Optional[Expression]) -> str:
        """Convert expression to string representation."""
        if expr is None:
            return ""
        if isinstance(expr, IdentifierExpression):
            return expr.name
        if isinstance(expr, BooleanLiteral):
            return "True" if expr.value else "False"
        if isinstance(expr, (IntegerLiteral, FloatLiteral)):
            return repr(expr.value)
        if isinstance(expr, Grouping):
            return self._expr_str(expr.expression)
        if isinstance(expr, BinaryExpression):
            return self._binary_str(expr)
        if isinstance(expr, UnaryExpression):
            op_str = SOURCE_OPERATORS[expr.operator]
            return f"({op_str}{self._expr_str(expr.operand)})"
        return f"<{type(expr).__name__}>"

    def _binary_str(self, expr: BinaryExpression) -> str:
        """Parenthesize a left-nested chain of binary expressions without recursing on the left."""
        spine = []
        node: Expression = expr
        while isinstance(node, BinaryExpression):
            spine.append(node)
            node = node.left

        text = self._expr_str(node)
        for link in reversed(spine):
            op_str = SOURCE_OPERATORS[link.operator]
            text = f"({text} {op_str} {self._expr_str(link.right)})"
        return text
