"""
Minilang Abstract Syntax Tree (AST) Definitions
===============================================

This module defines the AST node types built by the minilang parser.

Node Hierarchy
--------------
ASTNode (base)
├── TranslationUnit - root node, ordered function definitions
├── Function - prototype plus body expression
├── Prototype - function name and parameter names
└── Expressions
    ├── NumberLiteral - 64-bit float constant
    ├── VariableExpression - parameter reference
    ├── BinaryExpression - binary operator
    ├── UnaryExpression - unary operator (negation)
    ├── CallExpression - builtin or user function call
    └── IfExpression - if/then/else producing a value

Design Notes
------------
- Nodes are frozen dataclasses; children are owned by their parent
- The parser only builds a node once all of its children exist, so a
  partially built tree never escapes the parser
- Sequences are stored as tuples to keep nodes immutable
- Trees are walked with an explicit stack (see flatten()), so a long
  chain like ``x + x + ... + x`` is limited by memory, not call depth
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterator, Sequence, Union

from minilang.operators import Operator


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""

    def to_wat(self) -> list[str]:
        """Render this node as target instruction lines."""
        from minilang.codegen import InstructionEmitter
        return InstructionEmitter().emit(self)


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for nodes that evaluate to an f32 value."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Numeric constant.

    Attributes:
        value: The literal value
    """
    value: float


@dataclass(frozen=True)
class VariableExpression(Expression):
    """
    Reference to a function parameter.

    Attributes:
        name: The parameter name
    """
    name: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation (left op right).

    Attributes:
        operator: The operator
        left: Left operand
        right: Right operand
    """
    operator: Operator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Unary operation (op operand).

    Attributes:
        operator: The operator (always Operator.NEG from the parser)
        operand: The operand expression
    """
    operator: Operator
    operand: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Function call.

    Attributes:
        callee: Name of the called function or builtin
        arguments: Argument expressions in call order
    """
    callee: str
    arguments: tuple[Expression, ...]


@dataclass(frozen=True)
class IfExpression(Expression):
    """
    Conditional expression; both branches produce a value.

    Attributes:
        condition: The condition expression
        then_branch: Value when the condition is non-zero
        else_branch: Value otherwise
    """
    condition: Expression
    then_branch: Expression
    else_branch: Expression


# =============================================================================
# Definition Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype(ASTNode):
    """
    Function signature.

    Parameter names are kept as written; duplicates are not rejected.

    Attributes:
        name: Function name
        parameters: Parameter names in declaration order
    """
    name: str
    parameters: tuple[str, ...]


@dataclass(frozen=True)
class Function(ASTNode):
    """
    Function definition.

    Attributes:
        prototype: Name and parameters
        body: The expression computing the result
    """
    prototype: Prototype
    body: Expression

    @property
    def name(self) -> str:
        return self.prototype.name


@dataclass(frozen=True)
class TranslationUnit(ASTNode):
    """
    Root node: every successfully parsed definition, in source order.

    Order matters: functions are emitted and exported in this order.

    Attributes:
        functions: Function definitions
    """
    functions: tuple[Function, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.functions)

    def __iter__(self):
        return iter(self.functions)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care about.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_VariableExpression(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        collector.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to visit_<ClassName>, falling back to generic_visit."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit every child node."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, (list, tuple)):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


Piece = Union[str, ASTNode]


def flatten(root: ASTNode, expand: Callable[[ASTNode], Sequence[Piece]]) -> Iterator[str]:
    """
    Walk a tree depth-first with an explicit stack, yielding text pieces.

    ``expand(node)`` describes one node as a sequence of pieces in output
    order. String pieces are yielded as-is; node pieces are expanded in
    their place. Nesting depth costs stack entries, never call frames.

    Args:
        root: Node to start from
        expand: Returns the pieces for a single node

    Yields:
        String pieces in output order
    """
    stack: list[Piece] = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            yield item
        else:
            stack.extend(reversed(expand(item)))


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))

    Output:
        TranslationUnit
          Function: add(x, y)
            (x + y)
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

    def visit_TranslationUnit(self, node: TranslationUnit):
        self._emit("TranslationUnit")
        self.indent_level += 1
        for function in node.functions:
            self.visit(function)
        self.indent_level -= 1

    def visit_Function(self, node: Function):
        params = ", ".join(node.prototype.parameters)
        self._emit(f"Function: {node.name}({params})")
        self.indent_level += 1
        self._emit(self.expr_str(node.body))
        self.indent_level -= 1

    def generic_visit(self, node: ASTNode) -> None:
        if isinstance(node, Expression):
            self._emit(self.expr_str(node))
        else:
            super().generic_visit(node)

    def expr_str(self, expr: Expression) -> str:
        """Convert an expression to a fully parenthesized string."""
        return "".join(flatten(expr, self._expr_pieces))

    def _expr_pieces(self, expr: Expression) -> list[Piece]:
        if isinstance(expr, NumberLiteral):
            return [format_number(expr.value)]
        if isinstance(expr, VariableExpression):
            return [expr.name]
        if isinstance(expr, BinaryExpression):
            return ["(", expr.left, f" {expr.operator.symbol} ", expr.right, ")"]
        if isinstance(expr, UnaryExpression):
            return ["(", expr.operator.symbol, expr.operand, ")"]
        if isinstance(expr, CallExpression):
            pieces: list[Piece] = [expr.callee, "("]
            for i, argument in enumerate(expr.arguments):
                if i:
                    pieces.append(", ")
                pieces.append(argument)
            pieces.append(")")
            return pieces
        if isinstance(expr, IfExpression):
            return [
                "(if ", expr.condition,
                " then ", expr.then_branch,
                " else ", expr.else_branch, ")",
            ]
        return [f"<{type(expr).__name__}>"]


def format_number(value: float) -> str:
    """
    Render a literal the way the target text expects it.

    Integral values drop the fractional part ("3", not "3.0") and nothing
    is ever written in exponent form.

    >>> format_number(3.0), format_number(0.5), format_number(1e-05)
    ('3', '0.5', '0.00001')
    """
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    return format(Decimal(text), "f")
