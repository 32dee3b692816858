"""
Minilang Operator Model
=======================

Operators are the semantic side of operator tokens. The parser converts
an operator token with Operator.from_token(); the code generator turns an
Operator into its target mnemonic with Operator.mnemonic.

Arithmetic and comparison operators map to f32 instructions. Or/And map
to the i32 bitwise instructions, and Neg has no token of its own (the
parser creates it for a leading '-').
"""

from enum import Enum, auto

from minilang.errors import InternalCompilerError
from minilang.tokens import Token


class Operator(Enum):
    """Semantic operators of the expression language."""
    PLUS = auto()
    MINUS = auto()
    MUL = auto()
    DIV = auto()
    OR = auto()
    AND = auto()
    LESS = auto()
    GREATER = auto()
    EQUAL = auto()
    NOT_EQ = auto()
    NEG = auto()

    @classmethod
    def from_token(cls, token: Token) -> "Operator":
        """
        Convert a binary operator token.

        Raises:
            InternalCompilerError: If the token is not a binary operator
        """
        try:
            return _TOKEN_TO_OPERATOR[token]
        except KeyError:
            raise InternalCompilerError(f"Unexpected token {token.name}") from None

    @property
    def mnemonic(self) -> str:
        """Target instruction for this operator."""
        return _MNEMONICS[self]

    @property
    def symbol(self) -> str:
        """Source spelling, used by the AST printer."""
        return _SYMBOLS[self]


_TOKEN_TO_OPERATOR: dict[Token, Operator] = {
    Token.PLUS: Operator.PLUS,
    Token.MINUS: Operator.MINUS,
    Token.STAR: Operator.MUL,
    Token.SLASH: Operator.DIV,
    Token.OR: Operator.OR,
    Token.AND: Operator.AND,
    Token.LESS: Operator.LESS,
    Token.GREATER: Operator.GREATER,
    Token.EQUAL: Operator.EQUAL,
    Token.NOT_EQ: Operator.NOT_EQ,
}

_MNEMONICS: dict[Operator, str] = {
    Operator.PLUS: "f32.add",
    Operator.MINUS: "f32.sub",
    Operator.MUL: "f32.mul",
    Operator.DIV: "f32.div",
    Operator.OR: "i32.or",
    Operator.AND: "i32.and",
    Operator.GREATER: "f32.gt",
    Operator.LESS: "f32.lt",
    Operator.EQUAL: "f32.eq",
    Operator.NOT_EQ: "f32.ne",
    Operator.NEG: "f32.neg",
}

_SYMBOLS: dict[Operator, str] = {
    Operator.PLUS: "+",
    Operator.MINUS: "-",
    Operator.MUL: "*",
    Operator.DIV: "/",
    Operator.OR: "|",
    Operator.AND: "&",
    Operator.LESS: "<",
    Operator.GREATER: ">",
    Operator.EQUAL: "==",
    Operator.NOT_EQ: "<>",
    Operator.NEG: "-",
}
