"""
WebAssembly Text Code Generator for Minilang
============================================

This module turns a parsed TranslationUnit into a WebAssembly text module
(the ``.wat`` format accepted by wat2wasm).

Code Generation Strategy
------------------------
The target is a stack machine, so every expression is emitted by a
post-order walk: operands first, then the instruction that consumes them.

| Node               | Emitted instructions                          |
|--------------------|-----------------------------------------------|
| NumberLiteral      | f32.const <value>                             |
| VariableExpression | local.get $<name>                             |
| BinaryExpression   | <left> <right> <operator mnemonic>            |
| UnaryExpression    | <operand> <operator mnemonic>                 |
| CallExpression     | <args...> <builtin mnemonic> or call $<name>  |
| IfExpression       | <cond> if (result f32) <then> else <else> end |

Every parameter and every result is f32.

Generated Module Layout
-----------------------
    (module
    (func $add (param $x f32) (param $y f32) (result f32)
    local.get $x
    local.get $y
    f32.add
    )
    (export "add" (func $add))
    )

No validation happens here. Undefined callees, unknown variables and
arity mismatches all produce text that the assembler will reject.

Usage
-----
>>> from minilang.parser import parse_source
>>> from minilang.codegen import CodeGenerator
>>> program, errors = parse_source('def one() 1;')
>>> print(CodeGenerator().generate(program), end="")
(module
(func $one (result f32)
f32.const 1
)
(export "one" (func $one))
)
"""

import io
import logging
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, TextIO

from minilang.ast import (
    ASTNode,
    ASTVisitor,
    BinaryExpression,
    CallExpression,
    Function,
    IfExpression,
    NumberLiteral,
    Piece,
    Prototype,
    TranslationUnit,
    UnaryExpression,
    VariableExpression,
    flatten,
    format_number,
)

logger = logging.getLogger(__name__)


# Callee names that compile to a single instruction instead of a call
BUILTIN_FUNCTIONS: Mapping[str, str] = MappingProxyType({
    "sqrt": "f32.sqrt",
    "ceil": "f32.ceil",
    "floor": "f32.floor",
    "trunc": "f32.trunc",
    "nearest": "f32.nearest",
    "abs": "f32.abs",
    "neg": "f32.neg",
})

VALUE_TYPE = "f32"


# =============================================================================
# Instruction Emitter
# =============================================================================

class InstructionEmitter(ASTVisitor):
    """
    Renders AST nodes as instruction lines.

    Each visit_* method describes one node as a list of pieces: finished
    lines and child nodes, in output order. iter_lines() expands the child
    nodes with an explicit stack, so deeply nested expressions never run
    into the interpreter's recursion limit.
    """

    def emit(self, node: ASTNode) -> list[str]:
        return list(self.iter_lines(node))

    def iter_lines(self, node: ASTNode) -> Iterator[str]:
        """Yield the lines for ``node`` one at a time."""
        return flatten(node, self.visit)

    def generic_visit(self, node: ASTNode) -> list[Piece]:
        raise TypeError(f"cannot emit instructions for {type(node).__name__}")

    def visit_NumberLiteral(self, node: NumberLiteral) -> list[Piece]:
        return [f"{VALUE_TYPE}.const {format_number(node.value)}"]

    def visit_VariableExpression(self, node: VariableExpression) -> list[Piece]:
        return [f"local.get ${node.name}"]

    def visit_BinaryExpression(self, node: BinaryExpression) -> list[Piece]:
        return [node.left, node.right, node.operator.mnemonic]

    def visit_UnaryExpression(self, node: UnaryExpression) -> list[Piece]:
        return [node.operand, node.operator.mnemonic]

    def visit_CallExpression(self, node: CallExpression) -> list[Piece]:
        builtin = BUILTIN_FUNCTIONS.get(node.callee)
        if builtin is None:
            return [*node.arguments, f"call ${node.callee}"]
        return [*node.arguments, builtin]

    def visit_IfExpression(self, node: IfExpression) -> list[Piece]:
        return [
            node.condition,
            f"if (result {VALUE_TYPE})",
            node.then_branch,
            "else",
            node.else_branch,
            "end",
        ]

    def visit_Prototype(self, node: Prototype) -> list[Piece]:
        params = "".join(f" (param ${name} {VALUE_TYPE})" for name in node.parameters)
        return [f"(func ${node.name}{params} (result {VALUE_TYPE})"]

    def visit_Function(self, node: Function) -> list[Piece]:
        logger.debug(f"Emitting function '{node.name}'")
        return [node.prototype, node.body, ")"]

    def visit_TranslationUnit(self, node: TranslationUnit) -> list[Piece]:
        exports = [export_line(function.name) for function in node.functions]
        return ["(module", *node.functions, *exports, ")"]


def export_line(name: str) -> str:
    return f'(export "{name}" (func ${name}))'


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator:
    """
    Writes a complete text module for a TranslationUnit.

    The generator writes to ``sink`` line by line: the module header, one
    function body per definition, one export per definition in the same
    order, then the module footer.

    Attributes:
        sink: Text stream receiving the module (an in-memory buffer if None)
    """

    def __init__(self, sink: Optional[TextIO] = None):
        self.sink = sink
        self._emitter = InstructionEmitter()

    def run(self, program: TranslationUnit) -> None:
        """Write the module for ``program`` to the sink."""
        if self.sink is None:
            self.sink = io.StringIO()

        for line in self._emitter.iter_lines(program):
            self._write(line)

    def generate(self, program: TranslationUnit) -> str:
        """Render ``program`` and return the module text."""
        buffer = io.StringIO()
        CodeGenerator(buffer).run(program)
        return buffer.getvalue()

    def _write(self, line: str) -> None:
        self.sink.write(f"{line}\n")
