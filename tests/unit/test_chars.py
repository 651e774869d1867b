"""Unit tests for single-character and bulk character reads."""

from __future__ import annotations

import io

import pytest

from binreader import (
    BinaryReader,
    EndOfInputError,
    FormatError,
    FragmentedSource,
    FragmentedSourceConfig,
    MemorySource,
    StreamSource,
)


class TestReadOneChar:
    """Test the single-character path."""

    def test_multibyte_utf8(self, mixed_text: str) -> None:
        """Characters of every UTF-8 length decode one at a time."""
        with BinaryReader(mixed_text.encode("utf-8")) as reader:
            chars = [reader.read_one_char() for _ in range(len(mixed_text))]
            assert "".join(chars) == mixed_text
            assert reader.read_one_char() is None

    def test_non_seekable_source(self, mixed_text: str) -> None:
        """The single-char path works without seeking."""
        config = FragmentedSourceConfig(seekable=False)
        with BinaryReader(FragmentedSource(mixed_text.encode("utf-8"), config)) as reader:
            assert "".join(reader.read_char() for _ in range(len(mixed_text))) == mixed_text

    def test_utf16_surrogate_pair(self) -> None:
        """A surrogate pair becomes one character after two 2-byte reads."""
        with BinaryReader("A😀".encode("utf-16-le"), encoding="utf-16-le") as reader:
            assert reader.read_char() == "A"
            assert reader.read_char() == "😀"
            assert reader.read_one_char() is None

    def test_end_of_input(self) -> None:
        """read_one_char returns None; read_char raises."""
        with BinaryReader(b"") as reader:
            assert reader.read_one_char() is None
            with pytest.raises(EndOfInputError):
                reader.read_char()

    def test_bytes_after_char_untouched(self) -> None:
        """Only the bytes of one character are consumed."""
        with BinaryReader("é".encode("utf-8") + b"\x2a\x00\x00\x00") as reader:
            assert reader.read_char() == "é"
            assert reader.read_int32() == 42


class TestReadOneCharFailures:
    """Test decode failures on the single-character path."""

    def test_invalid_sequence_rewinds(self) -> None:
        """A seekable source is rewound to the start of the failed character."""
        source = MemorySource(b"ok\xe2\x41")
        with BinaryReader(source) as reader:
            assert reader.read_char() == "o"
            assert reader.read_char() == "k"

            with pytest.raises(FormatError):
                reader.read_one_char()

            assert source.tell() == 2
            assert reader.read_byte() == 0xE2
            assert reader.read_char() == "A"

    def test_rewind_restores_pending_sequence(self) -> None:
        """The decoder state from before the failed call is restored."""
        source = MemorySource(b"\x01\xe2A")
        with BinaryReader(source) as reader:
            assert reader.read_string() == ""

            with pytest.raises(FormatError):
                reader.read_one_char()

            assert source.tell() == 2
            assert reader._decoder is not None
            assert reader._decoder.has_pending is True

    def test_invalid_sequence_non_seekable(self) -> None:
        """A non-seekable source cannot be rewound; the bytes are consumed."""
        source = FragmentedSource(b"\xe2\x41", FragmentedSourceConfig(seekable=False))
        with BinaryReader(source) as reader:
            with pytest.raises(FormatError):
                reader.read_one_char()

            assert source.remaining() == 0
            assert reader.read_one_char() is None

    def test_truncated_character_rewinds(self) -> None:
        """Input ending inside a character is a format error."""
        source = MemorySource(b"\xf0\x9f\x98")
        with BinaryReader(source) as reader:
            with pytest.raises(FormatError):
                reader.read_one_char()
            assert source.tell() == 0

    def test_truncated_character_replace_handler(self) -> None:
        """With a lenient handler a truncated character becomes U+FFFD."""
        with BinaryReader(b"\xe2\x82", errors="replace") as reader:
            assert reader.read_char() == "\ufffd"
            assert reader.read_one_char() is None

    def test_surplus_character_is_kept(self) -> None:
        """Extra characters from one decode are returned by the next read."""
        with BinaryReader(b"\xe2A", errors="replace") as reader:
            assert reader.read_char() == "\ufffd"
            assert reader.peek_char() == "A"
            assert reader.read_char() == "A"
            assert reader.read_one_char() is None


class TestPeekChar:
    """Test peek_char()."""

    def test_peek_does_not_consume(self) -> None:
        """Peeking leaves the position unchanged."""
        source = MemorySource("€x".encode("utf-8"))
        with BinaryReader(source) as reader:
            assert reader.peek_char() == "€"
            assert source.tell() == 0
            assert reader.read_char() == "€"
            assert reader.peek_char() == "x"
            assert reader.read_char() == "x"
            assert reader.peek_char() is None

    def test_peek_keeps_pending_sequence(self) -> None:
        """A partial character left by a string read survives a peek."""
        source = MemorySource(b"\x01" + "€".encode("utf-8"))
        with BinaryReader(source) as reader:
            assert reader.read_string() == ""
            assert reader.peek_char() == "€"
            assert source.tell() == 2
            assert reader.read_char() == "€"

    def test_peek_non_seekable(self) -> None:
        """Non-seekable sources cannot peek."""
        source = FragmentedSource(b"abc", FragmentedSourceConfig(seekable=False))
        with BinaryReader(source) as reader:
            assert reader.peek_char() is None
            assert reader.read_char() == "a"


class TestReadChars:
    """Test bulk character reads."""

    def test_read_chars_counts_characters(self, mixed_text: str) -> None:
        """Counts are in characters, not bytes."""
        with BinaryReader(mixed_text.encode("utf-8")) as reader:
            assert reader.read_chars(3) == "Aé€"
            assert reader.read_chars(10) == "😀z"
            assert reader.read_chars(1) == ""

    def test_read_chars_stops_at_exact_count(self) -> None:
        """No bytes past the last requested character are consumed."""
        data = "héllo".encode("utf-8") + b"\x07"
        source = StreamSource(io.BytesIO(data))
        with BinaryReader(source) as reader:
            assert reader.read_chars(5) == "héllo"
            assert reader.read_byte() == 7

    def test_split_character_across_fragments(self) -> None:
        """A character split between two reads decodes once."""
        config = FragmentedSourceConfig(pattern=(2, 1, 2))
        with BinaryReader(FragmentedSource("a€b".encode("utf-8"), config)) as reader:
            assert reader.read_chars(3) == "a€b"

    def test_utf16_bulk(self) -> None:
        """Fixed two-byte encodings request two bytes per character."""
        text = "Hello, 世界 😀!"
        data = text.encode("utf-16-le")
        config = FragmentedSourceConfig(pattern=(3, 1, 5))
        with BinaryReader(FragmentedSource(data, config), encoding="utf-16-le") as reader:
            assert reader.read_chars(len(text)) == text
            assert reader.read_chars(1) == ""

    @pytest.mark.parametrize("encoding", ["utf-16-le", "utf-16-be"])
    def test_utf16_fragment_ends_mid_code_unit(self, encoding: str) -> None:
        """A pending odd byte lowers the quota so the next value is not touched."""
        data = "AB".encode(encoding) + b"\x5a" + "😀".encode(encoding) + b"\x2a\x00\x00\x00"
        config = FragmentedSourceConfig(pattern=(1, 9, 9))
        with BinaryReader(FragmentedSource(data, config), encoding=encoding) as reader:
            assert reader.read_chars(2) == "AB"
            assert reader.read_byte() == 0x5A
            assert reader.read_chars(1) == "😀"
            assert reader.read_int32() == 42

    def test_long_read_spans_chunks(self) -> None:
        """Reads longer than the internal chunk size loop until satisfied."""
        text = "€" * 500
        with BinaryReader(StreamSource(io.BytesIO(text.encode("utf-8")))) as reader:
            assert reader.read_chars(500) == text

    def test_zero_and_negative_counts(self) -> None:
        """Zero returns empty; negative is an argument error."""
        with BinaryReader(b"abc") as reader:
            assert reader.read_chars(0) == ""
            with pytest.raises(ValueError, match="count"):
                reader.read_chars(-1)
            assert reader.read_chars(3) == "abc"

    def test_invalid_bytes(self) -> None:
        """Strict decoding failures surface as FormatError."""
        with BinaryReader(b"ab\xff") as reader:
            with pytest.raises(FormatError):
                reader.read_chars(3)


class TestReadintoChars:
    """Test readinto_chars()."""

    def test_into_list(self) -> None:
        """Characters are written at the requested index."""
        buffer = ["-"] * 6
        with BinaryReader("xé€".encode("utf-8")) as reader:
            assert reader.readinto_chars(buffer, 1, 3) == 3
        assert buffer == ["-", "x", "é", "€", "-", "-"]

    def test_default_count_fills_rest(self) -> None:
        """Without a count the rest of the buffer is filled, or less at the end."""
        buffer = ["-"] * 4
        with BinaryReader(b"ab") as reader:
            assert reader.readinto_chars(buffer, 1) == 2
        assert buffer == ["-", "a", "b", "-"]

    def test_argument_errors_before_io(self) -> None:
        """Bad ranges are rejected without touching the source."""
        source = FragmentedSource(b"abc")
        with BinaryReader(source) as reader:
            with pytest.raises(ValueError, match="index"):
                reader.readinto_chars(["-"] * 3, -1, 1)
            with pytest.raises(ValueError, match="count"):
                reader.readinto_chars(["-"] * 3, 0, -1)
            with pytest.raises(ValueError, match="cannot hold"):
                reader.readinto_chars(["-"] * 3, 1, 3)
        assert source.read_calls == 0
