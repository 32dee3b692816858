"""
Minilang Recursive Descent Parser
=================================

This module implements a recursive descent parser for minilang. It pulls
tokens from a Lexer one at a time (one token of lookahead) and builds a
TranslationUnit.

Grammar (EBNF)
--------------
program     ::= (definition ';')*
definition  ::= 'def' prototype (if_expr | expression)
prototype   ::= IDENTIFIER '(' IDENTIFIER* ')'
if_expr     ::= 'if' expression 'then' expression 'else' expression
expression  ::= subexpr (comparison_op subexpr)*
subexpr     ::= term (addition_op term)*
term        ::= factor (multiplication_op factor)*
factor      ::= '-' expression
              | IDENTIFIER ('(' (expression (',' expression)*)? ')')?
              | '(' expression ')'
              | NUMBER

Expression Precedence (lowest to highest)
-----------------------------------------
1. comparison      < > == <>
2. addition        + - |
3. multiplication  * / &

Every tier is left-associative. A leading '-' negates a whole expression,
so ``-1 + 2`` parses as ``-(1 + 2)``.

The three tiers share one operator-stack loop keyed on
Token.binary_precedence(). Operator chains therefore cost no call depth,
and each level of parentheses or negation costs two frames.

Error Recovery
--------------
Each parse method returns a node or None. None means a diagnostic has
already been logged; callers hand the None straight back up. The top-level
loop then drops the broken definition and skips tokens until ';' or end of
input, so one bad definition never hides errors in the next one.

Example Usage
-------------
>>> from minilang.parser import Parser
>>> parser = Parser("def add(x y) x + y;")
>>> program = parser.parse()
>>> program.functions[0].prototype.parameters
('x', 'y')
"""

import logging
from typing import Optional

from minilang.ast import (
    BinaryExpression,
    CallExpression,
    Expression,
    Function,
    IfExpression,
    NumberLiteral,
    Prototype,
    TranslationUnit,
    UnaryExpression,
    VariableExpression,
)
from minilang.char import Source
from minilang.errors import ErrorLogger
from minilang.lexer import Lexer
from minilang.operators import Operator
from minilang.tokens import Token

logger = logging.getLogger(__name__)


# Tokens the recovery loop stops on
SYNC_TOKENS = frozenset({Token.EOF, Token.SEMICOLON})


class Parser:
    """
    Recursive descent parser for minilang.

    Syntax errors never raise. They are pushed onto ``error_logger`` with the
    line the lexer was on, and parsing carries on with the next definition.

    Attributes:
        lexer: Token source
        token: Current lookahead token
        functions: Definitions parsed so far
        error_logger: Collected diagnostics
    """

    def __init__(self, source: Source, error_logger: Optional[ErrorLogger] = None):
        """
        Initialize the parser.

        Args:
            source: Program text as bytes, str, or a binary stream
            error_logger: Where to record diagnostics (a fresh one if None)
        """
        self.lexer = Lexer(source)
        self.token = Token.NONE
        self.functions: list[Function] = []
        self.error_logger = error_logger if error_logger is not None else ErrorLogger()

    def parse(self) -> TranslationUnit:
        """
        Parse the whole source.

        Returns:
            TranslationUnit holding every definition that parsed cleanly.
            Check ``error_logger`` before using it for code generation.
        """
        self._next_token()

        while self.token is not Token.EOF:
            if self.token is Token.DEFINE:
                self._handle_definition()
            else:
                self._push_error("Expected 'def'")
                self._synchronize()

            if self.token is Token.SEMICOLON:
                self._next_token()
            else:
                self._push_error("Missing ';'")

        logger.debug(
            f"Parsed {len(self.functions)} definitions, "
            f"{self.error_logger.error_count()} diagnostics"
        )
        return TranslationUnit(functions=tuple(self.functions))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _next_token(self) -> None:
        self.token = self.lexer.get_token()

    @property
    def lexeme(self) -> str:
        return self.lexer.lexeme

    def _push_error(self, message: str) -> None:
        line = self.lexer.line
        logger.debug(f"line {line}: {message}")
        self.error_logger.push(line, message)

    def _synchronize(self) -> None:
        """Skip tokens until ';' or end of input."""
        skipped = 0
        while self.token not in SYNC_TOKENS:
            self._next_token()
            skipped += 1
        if skipped:
            logger.debug(f"Recovery skipped {skipped} tokens to {self.token.name}")

    # =========================================================================
    # Definitions
    # =========================================================================

    def _handle_definition(self) -> None:
        function = self._parse_definition()
        if function is None:
            self._synchronize()
            return
        logger.debug(f"Parsed definition '{function.name}'")
        self.functions.append(function)

    def _parse_definition(self) -> Optional[Function]:
        self._next_token()  # consume 'def'
        prototype = self._parse_prototype()
        if prototype is None:
            return None

        if self.token is Token.IF:
            body = self._parse_if_expression()
        else:
            body = self._parse_expression()
        if body is None:
            return None

        return Function(prototype=prototype, body=body)

    def _parse_prototype(self) -> Optional[Prototype]:
        if self.token is not Token.IDENTIFIER:
            self._push_error("Expected function name in prototype")
            return None

        name = self.lexeme
        self._next_token()

        if self.token is not Token.LPAR:
            self._push_error("Expected '(' in prototype")
            return None
        self._next_token()

        parameters = []
        while self.token is Token.IDENTIFIER:
            parameters.append(self.lexeme)
            self._next_token()

        if self.token is not Token.RPAR:
            self._push_error("Expected ')' in prototype")
            return None
        self._next_token()

        return Prototype(name=name, parameters=tuple(parameters))

    def _parse_if_expression(self) -> Optional[Expression]:
        self._next_token()  # consume 'if'
        condition = self._parse_expression()
        if condition is None:
            return None

        if self.token is not Token.THEN:
            self._push_error("Expected 'then'")
            return None
        self._next_token()

        then_branch = self._parse_expression()
        if then_branch is None:
            return None

        if self.token is not Token.ELSE:
            self._push_error("Expected 'else'")
            return None
        self._next_token()

        else_branch = self._parse_expression()
        if else_branch is None:
            return None

        return IfExpression(
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
        )

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Optional[Expression]:
        """
        Parse ``factor (binary_op factor)*`` over all three tiers at once.

        Operators wait on a stack until one of equal or lower precedence
        arrives. That folds each tier to the left and lets higher tiers bind
        tighter, with a single call frame however long the chain is.
        """
        operand = self._parse_factor()
        if operand is None:
            return None

        operands = [operand]
        pending: list[tuple[int, Operator]] = []

        precedence = self.token.binary_precedence()
        while precedence:
            while pending and pending[-1][0] >= precedence:
                _reduce(operands, pending.pop()[1])
            pending.append((precedence, Operator.from_token(self.token)))
            self._next_token()

            operand = self._parse_factor()
            if operand is None:
                return None
            operands.append(operand)
            precedence = self.token.binary_precedence()

        while pending:
            _reduce(operands, pending.pop()[1])
        return operands[0]

    def _parse_factor(self) -> Optional[Expression]:
        if self.token is Token.IDENTIFIER:
            return self._parse_identifier()
        if self.token is Token.NUMBER:
            return self._parse_number()

        if self.token is Token.MINUS:
            self._next_token()
            operand = self._parse_expression()
            if operand is None:
                return None
            return UnaryExpression(operator=Operator.NEG, operand=operand)

        if self.token is Token.LPAR:
            self._next_token()
            node = self._parse_expression()
            if node is None:
                return None
            if self.token is not Token.RPAR:
                self._push_error("Missing ')'")
                return None
            self._next_token()
            return node

        self._push_error("Expected identifier or number")
        return None

    def _parse_identifier(self) -> Optional[Expression]:
        """Variable reference, or a call when followed by '('."""
        name = self.lexeme
        self._next_token()

        if self.token is not Token.LPAR:
            return VariableExpression(name=name)
        self._next_token()

        arguments = []
        if self.token is not Token.RPAR:
            while True:
                argument = self._parse_expression()
                if argument is None:
                    return None
                arguments.append(argument)

                if self.token is Token.RPAR:
                    break
                if self.token is not Token.COMMA:
                    self._push_error("Expected ')' or ',' in argument list")
                    return None
                self._next_token()

        self._next_token()  # consume ')'
        return CallExpression(callee=name, arguments=tuple(arguments))

    def _parse_number(self) -> Optional[Expression]:
        node = NumberLiteral(value=float(self.lexeme))
        self._next_token()
        return node


def _reduce(operands: list[Expression], operator: Operator) -> None:
    """Replace the top two operands with ``left operator right``."""
    right = operands.pop()
    left = operands.pop()
    operands.append(BinaryExpression(operator=operator, left=left, right=right))


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: Source) -> tuple[TranslationUnit, ErrorLogger]:
    """
    Parse program text.

    Returns:
        The translation unit and the diagnostics logged while building it
    """
    parser = Parser(source)
    program = parser.parse()
    return program, parser.error_logger
