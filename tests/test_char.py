# =============================================================================
# test_char.py - Character Classifier and UTF-8 Reader Tests
# =============================================================================
# Tests for minilang.char:
#   - Classification queries on decoded characters and sentinels
#   - Symmetric equality against plain strings
#   - Incremental UTF-8 decoding, including split multi-byte sequences
#   - Fatal errors on malformed input and sentinel conversion
# =============================================================================

import io

import pytest

from minilang.char import Char, CharKind, Utf8Reader, as_byte_stream
from minilang.errors import InternalCompilerError, SourceDecodeError


# =============================================================================
# Classification
# =============================================================================

class TestClassification:
    """Classification queries on single characters."""

    def test_alphabetic(self):
        assert Char("a").is_alphabetic()
        assert Char("Z").is_alphabetic()
        assert Char("é").is_alphabetic()
        assert not Char("1").is_alphabetic()

    def test_digit_is_ascii_only(self):
        """Only 0-9 count as digits; other Unicode digits do not."""
        assert Char("1").is_digit()
        assert Char("0").is_digit()
        assert not Char("a").is_digit()
        assert not Char("٣").is_digit()  # Arabic-Indic three

    def test_alphanumeric(self):
        assert Char("1").is_alphanumeric()
        assert Char("a").is_alphanumeric()
        assert not Char("_").is_alphanumeric()
        assert not Char("+").is_alphanumeric()

    def test_whitespace(self):
        for ch in (" ", "\n", "\r", "\t"):
            assert Char(ch).is_whitespace()
        assert not Char("x").is_whitespace()

    def test_combining_vowel_sign_is_alphabetic(self):
        """Devanagari vowel sign I (U+093F) is a mark, but Alphabetic."""
        assert Char("ि").is_alphabetic()
        assert Char("ि").is_alphanumeric()

    def test_letter_numeral_is_alphabetic(self):
        assert Char("Ⅻ").is_alphabetic()

    def test_other_numbers_are_alphanumeric(self):
        assert Char("٣").is_alphanumeric()
        assert Char("½").is_alphanumeric()
        assert not Char("½").is_alphabetic()

    @pytest.mark.parametrize("ch", ["\x1c", "\x1d", "\x1e", "\x1f"])
    def test_information_separators_are_not_whitespace(self, ch):
        assert not Char(ch).is_whitespace()

    @pytest.mark.parametrize("ch", ["\x0b", "\x0c", "\x85", "\xa0", "\u2028", "\u3000"])
    def test_unicode_white_space(self, ch):
        assert Char(ch).is_whitespace()

    def test_newline(self):
        assert Char("\n").is_newline()
        assert Char("\r").is_newline()
        assert not Char(" ").is_newline()
        assert not Char("\t").is_newline()

    def test_classes_are_exclusive(self):
        """At most one of alphabetic, digit and whitespace holds for any character."""
        for code_point in range(0x3000):
            if 0xD800 <= code_point <= 0xDFFF:
                continue
            ch = Char(chr(code_point))
            hits = [ch.is_alphabetic(), ch.is_digit(), ch.is_whitespace()]
            assert sum(hits) <= 1, repr(ch)
            if ch.is_alphabetic() or ch.is_digit():
                assert ch.is_alphanumeric()
            assert not ch.is_eof()


class TestSentinels:
    """EOF and NO_DATA sentinels."""

    @pytest.mark.parametrize("sentinel", [Char.eof(), Char.no_data()])
    def test_sentinel_classification(self, sentinel):
        assert sentinel.is_eof()
        assert not sentinel.is_alphabetic()
        assert not sentinel.is_alphanumeric()
        assert not sentinel.is_digit()
        assert not sentinel.is_whitespace()
        assert not sentinel.is_newline()

    def test_sentinel_kinds(self):
        assert Char.eof().kind is CharKind.EOF
        assert Char.no_data().kind is CharKind.NO_DATA
        assert Char("a").kind is CharKind.CHAR

    @pytest.mark.parametrize("sentinel", [Char.eof(), Char.no_data()])
    def test_as_character_on_sentinel_is_fatal(self, sentinel):
        with pytest.raises(InternalCompilerError):
            sentinel.as_character()

    def test_as_character(self):
        assert Char("a").as_character() == "a"

    def test_char_must_wrap_one_character(self):
        with pytest.raises(InternalCompilerError):
            Char("ab")
        with pytest.raises(InternalCompilerError):
            Char(None)


class TestEquality:
    """Equality against string literals works from both sides."""

    def test_symmetric(self):
        ch = Char("a")
        assert ch == "a"
        assert "a" == ch
        assert ch != "b"
        assert "b" != ch

    def test_sentinel_never_equals_a_character(self):
        assert Char.eof() != "a"
        assert "\0" != Char.eof()

    def test_char_to_char(self):
        assert Char("a") == Char("a")
        assert Char("a") != Char("b")
        assert Char.eof() == Char.eof()
        assert Char.eof() != Char.no_data()
        assert hash(Char("a")) == hash(Char("a"))


# =============================================================================
# UTF-8 Reader
# =============================================================================

def read_all(reader: Utf8Reader) -> str:
    chars = []
    while True:
        ch = reader.next_char()
        if ch.is_eof():
            return "".join(chars)
        chars.append(ch.as_character())


class TestUtf8Reader:
    """Decoding byte streams into Chars."""

    def test_single_char(self):
        reader = Utf8Reader(io.BytesIO(b"foobar"))
        assert reader.next_char() == "f"

    def test_eof_after_input(self):
        reader = Utf8Reader(io.BytesIO(b"foo"))
        for _ in range(3):
            reader.next_char()
        assert reader.next_char().is_eof()
        assert reader.next_char().is_eof()

    def test_multibyte_chars(self):
        reader = Utf8Reader(io.BytesIO("ü🙂".encode("utf-8")))
        assert reader.next_char() == "ü"
        assert reader.next_char() == "🙂"
        assert reader.next_char().is_eof()

    def test_sequence_split_across_reads(self, monkeypatch):
        """Multi-byte sequences survive chunk boundaries."""
        monkeypatch.setattr(Utf8Reader, "CHUNK_SIZE", 1)
        reader = Utf8Reader(io.BytesIO("aé🙂b".encode("utf-8")))
        assert read_all(reader) == "aé🙂b"

    def test_invalid_byte_is_fatal(self):
        reader = Utf8Reader(io.BytesIO(b"def \xff"))
        with pytest.raises(SourceDecodeError) as exc_info:
            read_all(reader)
        assert exc_info.value.offset == 4

    def test_truncated_sequence_is_fatal(self):
        reader = Utf8Reader(io.BytesIO(b"abc\xc3"))
        with pytest.raises(SourceDecodeError):
            read_all(reader)

    def test_no_data_from_non_blocking_stream(self):
        class NonBlocking:
            def read(self, size):
                return None

        assert Utf8Reader(NonBlocking()).next_char().kind is CharKind.NO_DATA

    def test_read_errors_propagate(self):
        class Broken:
            def read(self, size):
                raise OSError("device gone")

        with pytest.raises(OSError):
            Utf8Reader(Broken()).next_char()


class TestAsByteStream:
    """Source normalization."""

    def test_str_is_utf8_encoded(self):
        assert as_byte_stream("é").read() == "é".encode("utf-8")

    def test_bytes(self):
        assert as_byte_stream(b"abc").read() == b"abc"

    def test_stream_passes_through(self):
        stream = io.BytesIO(b"abc")
        assert as_byte_stream(stream) is stream
