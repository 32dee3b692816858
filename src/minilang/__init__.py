"""
Minilang - Expression Language to WebAssembly Compiler
======================================================

This package compiles minilang, a tiny expression-oriented language of
numeric functions, into WebAssembly text (.wat). Every value is an f32 and
every function is exported from the generated module.

Pipeline
--------
    UTF-8 bytes → Lexer → Parser → AST → Code Generator → .wat → wat2wasm

Language
--------
    # comments run to end of line
    def add(x y) x + y;
    def max(a b) if a > b then a else b;
    def hyp(a b) sqrt(a*a + b*b);

Usage
-----
>>> from minilang import compile_wat
>>> print(compile_wat("def add(x y) x + y;"))

Or from the command line:
    $ mlc add.ml -o add.wat
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from minilang.compiler import (
    CompilerOptions,
    CompilerResult,
    MinilangCompiler,
    compile_wat,
)
from minilang.errors import (
    AssemblerError,
    CompilationError,
    Diagnostic,
    ErrorLogger,
    InternalCompilerError,
    MinilangError,
    SourceDecodeError,
)
from minilang.lexer import Lexer, LexedToken
from minilang.tokens import Token
from minilang.operators import Operator
from minilang.parser import Parser, parse_source
from minilang.codegen import BUILTIN_FUNCTIONS, CodeGenerator
from minilang.ast import (
    ASTPrinter,
    BinaryExpression,
    CallExpression,
    Function,
    IfExpression,
    NumberLiteral,
    Prototype,
    TranslationUnit,
    UnaryExpression,
    VariableExpression,
)

__all__ = [
    # Version
    "__version__",
    # Main API
    "MinilangCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_wat",
    # Errors
    "MinilangError",
    "SourceDecodeError",
    "InternalCompilerError",
    "CompilationError",
    "AssemblerError",
    "Diagnostic",
    "ErrorLogger",
    # Front end
    "Lexer",
    "LexedToken",
    "Token",
    "Operator",
    "Parser",
    "parse_source",
    # Code generation
    "CodeGenerator",
    "BUILTIN_FUNCTIONS",
    # AST nodes
    "ASTPrinter",
    "TranslationUnit",
    "Function",
    "Prototype",
    "NumberLiteral",
    "VariableExpression",
    "BinaryExpression",
    "UnaryExpression",
    "CallExpression",
    "IfExpression",
]
