"""
Character Classification and UTF-8 Decoding
===========================================

The lexer never looks at raw bytes. It pulls one decoded character at a
time from a Utf8Reader and asks the resulting Char what kind of character
it is.

A Char wraps either a single Unicode scalar value or one of two sentinels:

| Sentinel  | Meaning                                        |
|-----------|------------------------------------------------|
| EOF       | The byte source is exhausted                   |
| NO_DATA   | A non-blocking source had nothing to offer yet |

Both sentinels answer False to every classification query except is_eof().

Example Usage
-------------
>>> import io
>>> reader = Utf8Reader(io.BytesIO("a1".encode()))
>>> ch = reader.next_char()
>>> ch.is_alphabetic(), ch == "a"
(True, True)
>>> reader.next_char().is_digit()
True
>>> reader.next_char().is_eof()
True
"""

import codecs
import io
from enum import Enum, auto
from typing import BinaryIO, Optional, Union

import regex

from minilang.errors import InternalCompilerError, SourceDecodeError


# Anything the front end accepts as program text
Source = Union[bytes, str, BinaryIO]

# Unicode character properties. These differ from str.isalpha() and
# str.isspace(): combining vowel signs and letter numerals are Alphabetic,
# and the information separators U+001C..U+001F are not White_Space.
_ALPHABETIC = regex.compile(r"\p{Alphabetic}")
_ALPHANUMERIC = regex.compile(r"[\p{Alphabetic}\p{N}]")
_WHITE_SPACE = regex.compile(r"\p{White_Space}")


class CharKind(Enum):
    """What a Char wraps."""
    CHAR = auto()       # A decoded scalar value
    EOF = auto()        # End of input
    NO_DATA = auto()    # Source had no data available


class Char:
    """
    One decoded character or an end-of-input sentinel.

    Comparison against a plain one-character string works in both
    directions: ``ch == "a"`` and ``"a" == ch``. Sentinels never compare
    equal to any character.
    """

    __slots__ = ("_kind", "_value")

    def __init__(self, value: Optional[str], kind: CharKind = CharKind.CHAR):
        if kind is CharKind.CHAR and (value is None or len(value) != 1):
            raise InternalCompilerError(f"Char needs exactly one character, got {value!r}")
        self._kind = kind
        self._value = value if kind is CharKind.CHAR else None

    @classmethod
    def eof(cls) -> "Char":
        return cls(None, CharKind.EOF)

    @classmethod
    def no_data(cls) -> "Char":
        return cls(None, CharKind.NO_DATA)

    @property
    def kind(self) -> CharKind:
        return self._kind

    # =========================================================================
    # Classification
    # =========================================================================

    def is_alphabetic(self) -> bool:
        """Unicode Alphabetic property (letters, letter numerals, vowel signs)."""
        return self._matches(_ALPHABETIC)

    def is_alphanumeric(self) -> bool:
        """Alphabetic, or any Unicode number (Nd, Nl, No)."""
        return self._matches(_ALPHANUMERIC)

    def is_digit(self) -> bool:
        """ASCII 0-9 only; other Unicode digits do not start numbers."""
        return self._value is not None and "0" <= self._value <= "9"

    def is_whitespace(self) -> bool:
        return self._matches(_WHITE_SPACE)

    def is_newline(self) -> bool:
        return self == "\r" or self == "\n"

    def is_eof(self) -> bool:
        return self._kind is not CharKind.CHAR

    def _matches(self, pattern: "regex.Pattern") -> bool:
        return self._value is not None and pattern.match(self._value) is not None

    def as_character(self) -> str:
        """
        Return the wrapped character.

        Raises:
            InternalCompilerError: If this Char is a sentinel
        """
        if self._value is None:
            raise InternalCompilerError(f"unable to convert {self._kind.name} into a character")
        return self._value

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Char):
            return self._kind is other._kind and self._value == other._value
        if isinstance(other, str):
            return self._value is not None and self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._kind, self._value))

    def __repr__(self) -> str:
        if self._value is None:
            return f"Char({self._kind.name})"
        return f"Char({self._value!r})"


# =============================================================================
# UTF-8 Reader
# =============================================================================

class Utf8Reader:
    """
    Decodes a binary stream into Chars one at a time.

    The stream is read in chunks and fed to an incremental decoder, so
    multi-byte sequences split across chunk boundaries decode correctly.
    Read errors from the stream propagate unchanged.

    Raises:
        SourceDecodeError: On malformed or truncated UTF-8
    """

    CHUNK_SIZE = 4096

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._pending = ""
        self._index = 0
        self._offset = 0        # Bytes handed to the decoder so far
        self._finished = False

    def next_char(self) -> Char:
        """Return the next character, Char.eof() once the stream is drained."""
        while self._index >= len(self._pending):
            if self._finished:
                return Char.eof()

            chunk = self._stream.read(self.CHUNK_SIZE)
            if chunk is None:
                return Char.no_data()

            final = len(chunk) == 0
            buffered = len(self._decoder.getstate()[0])
            try:
                self._pending = self._decoder.decode(chunk, final)
            except UnicodeDecodeError as e:
                raise SourceDecodeError(self._offset - buffered + e.start, e.reason) from e

            self._index = 0
            self._offset += len(chunk)
            self._finished = final

        ch = self._pending[self._index]
        self._index += 1
        return Char(ch)


def as_byte_stream(source: Source) -> BinaryIO:
    """Wrap str or bytes program text in a binary stream; pass streams through."""
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8"))
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source))
    return source
