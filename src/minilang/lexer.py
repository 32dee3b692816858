"""
Minilang Lexer (Tokenizer)
==========================

This module converts a UTF-8 byte stream into minilang tokens, one call
to get_token() at a time. The parser drives the lexer directly and reads
the text of the current token from ``lexer.lexeme``.

Token Categories
----------------
- Keywords: def, if, then, else
- Identifiers: a letter followed by letters or digits
- Numbers: digits, optionally followed by '.' and more digits ("1.", "1.5")
- Punctuation: ( ) , ;
- Operators: + - * / | & < > == <>

Comments
--------
A '#' starts a comment that runs to the end of the line.

Example Usage
-------------
>>> from minilang.lexer import Lexer
>>> lexer = Lexer("def add(x y) x + y;")
>>> for token in lexer.tokens():
...     print(token)
DEFINE 'def' (line 1)
IDENTIFIER 'add' (line 1)
LPAR '(' (line 1)
...
"""

from typing import Iterator, NamedTuple

from minilang.char import Char, Source, Utf8Reader, as_byte_stream
from minilang.tokens import KEYWORDS, SINGLE_CHAR_TOKENS, Token


class LexedToken(NamedTuple):
    """A token kind together with its lexeme and source line."""
    kind: Token
    lexeme: str
    line: int

    def __str__(self) -> str:
        return f"{self.kind.name} {self.lexeme!r} (line {self.line})"


class Lexer:
    """
    Pull-based tokenizer over a byte stream.

    Attributes:
        lexeme: Text of the token most recently returned by get_token()
        last_char: One character of lookahead
    """

    def __init__(self, source: Source):
        """
        Initialize the lexer.

        Args:
            source: Program text as bytes, str, or a binary stream
        """
        self._reader = Utf8Reader(as_byte_stream(source))
        self.lexeme = ""
        # Primed with a blank so the first get_token() reads past it
        self.last_char = Char(" ")
        self._line = 1

    @property
    def line(self) -> int:
        """Current source line (1-indexed)."""
        return self._line

    def get_token(self) -> Token:
        """
        Scan and classify the next token.

        Comments are skipped in a loop rather than by re-entering this
        method, so long runs of comment lines cost no stack depth.
        """
        while True:
            self.lexeme = ""
            self._skip_whitespace()

            if self.last_char.is_alphabetic():
                self._read_identifier()
                return KEYWORDS.get(self.lexeme, Token.IDENTIFIER)

            if self.last_char.is_digit():
                self._read_number()
                return Token.NUMBER

            if self.last_char == "#":
                self._skip_comment()
                if not self.last_char.is_eof():
                    continue

            if self.last_char.is_eof():
                return Token.EOF

            return self._read_punctuation()

    def get_char(self) -> None:
        """Advance the lookahead by one decoded character."""
        self.last_char = self._reader.next_char()

    def tokens(self) -> Iterator[LexedToken]:
        """
        Generate tokens up to and including the first EOF.

        Yields:
            LexedToken for every token in the source
        """
        while True:
            kind = self.get_token()
            yield LexedToken(kind, self.lexeme, self._line)
            if kind is Token.EOF:
                return

    # =========================================================================
    # Scanning Helpers
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while self.last_char.is_whitespace():
            if self.last_char.is_newline():
                self._line += 1
            self.get_char()

    def _read_identifier(self) -> None:
        self._consume()
        while self.last_char.is_alphanumeric():
            self._consume()

    def _read_number(self) -> None:
        self._read_digits()
        if self.last_char == ".":
            # The '.' itself is consumed here; a fraction is optional
            self._read_digits()

    def _read_digits(self) -> None:
        self._consume()
        while self.last_char.is_digit():
            self._consume()

    def _skip_comment(self) -> None:
        # Stops on the line break so _skip_whitespace can count it
        while True:
            self.get_char()
            if self.last_char.is_eof() or self.last_char.is_newline():
                return

    def _read_punctuation(self) -> Token:
        ch = self.last_char.as_character()
        self._consume()

        if ch == "<":
            if self.last_char == ">":
                self._consume()
                return Token.NOT_EQ
            return Token.LESS

        if ch == "=":
            if self.last_char == "=":
                self._consume()
                return Token.EQUAL
            return Token.NONE

        return SINGLE_CHAR_TOKENS.get(ch, Token.INVALID_CHAR)

    def _consume(self) -> None:
        self.lexeme += self.last_char.as_character()
        self.get_char()
