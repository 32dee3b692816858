"""
Token and Operator Model Tests
==============================

Covers the precedence-tier predicates on Token and the two mappings on
Operator (token to operator, operator to mnemonic).
"""

import pytest

from minilang.errors import InternalCompilerError
from minilang.operators import Operator
from minilang.tokens import KEYWORDS, Token


COMPARISON = {Token.LESS, Token.GREATER, Token.EQUAL, Token.NOT_EQ}
ADDITION = {Token.PLUS, Token.MINUS, Token.OR}
MULTIPLICATION = {Token.STAR, Token.SLASH, Token.AND}


class TestTokenTiers:
    """Precedence tier predicates."""

    @pytest.mark.parametrize("token", list(Token))
    def test_predicates_match_tiers(self, token):
        assert token.is_comparison_operator() == (token in COMPARISON)
        assert token.is_addition_operator() == (token in ADDITION)
        assert token.is_multiplication_operator() == (token in MULTIPLICATION)

    @pytest.mark.parametrize("token", list(Token))
    def test_tiers_do_not_overlap(self, token):
        hits = [
            token.is_comparison_operator(),
            token.is_addition_operator(),
            token.is_multiplication_operator(),
        ]
        assert sum(hits) <= 1

    @pytest.mark.parametrize("token", list(Token))
    def test_binary_precedence(self, token):
        expected = 0
        if token in COMPARISON:
            expected = 1
        elif token in ADDITION:
            expected = 2
        elif token in MULTIPLICATION:
            expected = 3
        assert token.binary_precedence() == expected

    def test_keywords(self):
        assert KEYWORDS == {
            "def": Token.DEFINE,
            "if": Token.IF,
            "then": Token.THEN,
            "else": Token.ELSE,
        }


class TestOperatorFromToken:
    """Token to Operator conversion."""

    @pytest.mark.parametrize("token, expected", [
        (Token.PLUS, Operator.PLUS),
        (Token.MINUS, Operator.MINUS),
        (Token.STAR, Operator.MUL),
        (Token.SLASH, Operator.DIV),
        (Token.OR, Operator.OR),
        (Token.AND, Operator.AND),
        (Token.LESS, Operator.LESS),
        (Token.GREATER, Operator.GREATER),
        (Token.EQUAL, Operator.EQUAL),
        (Token.NOT_EQ, Operator.NOT_EQ),
    ])
    def test_operator_tokens(self, token, expected):
        assert Operator.from_token(token) is expected

    def test_every_tier_token_converts(self):
        for token in COMPARISON | ADDITION | MULTIPLICATION:
            Operator.from_token(token)

    @pytest.mark.parametrize("token", [
        Token.EOF, Token.IDENTIFIER, Token.NUMBER, Token.LPAR,
        Token.SEMICOLON, Token.NONE, Token.INVALID_CHAR, Token.DEFINE,
    ])
    def test_non_operator_is_fatal(self, token):
        with pytest.raises(InternalCompilerError, match=token.name):
            Operator.from_token(token)


class TestMnemonics:
    """Operator to target instruction."""

    @pytest.mark.parametrize("operator, mnemonic", [
        (Operator.PLUS, "f32.add"),
        (Operator.MINUS, "f32.sub"),
        (Operator.MUL, "f32.mul"),
        (Operator.DIV, "f32.div"),
        (Operator.OR, "i32.or"),
        (Operator.AND, "i32.and"),
        (Operator.GREATER, "f32.gt"),
        (Operator.LESS, "f32.lt"),
        (Operator.EQUAL, "f32.eq"),
        (Operator.NOT_EQ, "f32.ne"),
        (Operator.NEG, "f32.neg"),
    ])
    def test_mnemonic(self, operator, mnemonic):
        assert operator.mnemonic == mnemonic

    def test_every_operator_has_a_symbol(self):
        for operator in Operator:
            assert operator.symbol
