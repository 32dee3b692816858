"""
Minilang Token Model
====================

Tokens carry no payload. The text behind the most recent token lives in
the lexer's ``lexeme`` attribute.

Binary operator tokens fall into three precedence tiers, lowest first:

| Tier           | Tokens               | Predicate                    |
|----------------|----------------------|------------------------------|
| comparison     | <  >  ==  <>         | is_comparison_operator()     |
| addition       | +  -  \\|             | is_addition_operator()       |
| multiplication | *  /  &              | is_multiplication_operator() |
"""

from enum import Enum, auto


class Token(Enum):
    """Token kinds produced by the minilang lexer."""

    # === Structural ===
    EOF = auto()            # End of input
    NONE = auto()           # Uninitialized / bare '='
    INVALID_CHAR = auto()   # Character that starts no token

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    NUMBER = auto()

    # === Keywords ===
    DEFINE = auto()         # def
    IF = auto()             # if
    THEN = auto()           # then
    ELSE = auto()           # else

    # === Punctuation ===
    LPAR = auto()           # (
    RPAR = auto()           # )
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    OR = auto()             # |
    AND = auto()            # &
    LESS = auto()           # <
    GREATER = auto()        # >
    EQUAL = auto()          # ==
    NOT_EQ = auto()         # <>

    def is_addition_operator(self) -> bool:
        return self in _ADDITION_OPERATORS

    def is_multiplication_operator(self) -> bool:
        return self in _MULTIPLICATION_OPERATORS

    def is_comparison_operator(self) -> bool:
        return self in _COMPARISON_OPERATORS

    def binary_precedence(self) -> int:
        """
        Binding strength as a binary operator.

        Returns:
            3 for multiplication, 2 for addition, 1 for comparison,
            0 for tokens that are not binary operators
        """
        if self.is_multiplication_operator():
            return 3
        if self.is_addition_operator():
            return 2
        if self.is_comparison_operator():
            return 1
        return 0


_ADDITION_OPERATORS = frozenset({Token.PLUS, Token.MINUS, Token.OR})
_MULTIPLICATION_OPERATORS = frozenset({Token.STAR, Token.SLASH, Token.AND})
_COMPARISON_OPERATORS = frozenset({Token.LESS, Token.GREATER, Token.EQUAL, Token.NOT_EQ})


# Map keyword strings to their token types
KEYWORDS: dict[str, Token] = {
    "def": Token.DEFINE,
    "if": Token.IF,
    "then": Token.THEN,
    "else": Token.ELSE,
}


# Single-character punctuation that never needs a second character of lookahead
SINGLE_CHAR_TOKENS: dict[str, Token] = {
    "(": Token.LPAR,
    ")": Token.RPAR,
    ">": Token.GREATER,
    "*": Token.STAR,
    "-": Token.MINUS,
    "/": Token.SLASH,
    ";": Token.SEMICOLON,
    ",": Token.COMMA,
    "+": Token.PLUS,
    "|": Token.OR,
    "&": Token.AND,
}
