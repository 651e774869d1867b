"""Unit tests for length-prefixed string reads."""

from __future__ import annotations

import io

import pytest

from binreader import (
    BinaryReader,
    EndOfInputError,
    FormatError,
    FragmentedSource,
    FragmentedSourceConfig,
    StreamSource,
    encode_7bit_int,
)


def _prefixed(text: str, encoding: str = "utf-8") -> bytes:
    data = text.encode(encoding)
    return encode_7bit_int(len(data)) + data


class TestReadString:
    """Test read_string()."""

    def test_hello_scenario(self, hello_bytes: bytes) -> None:
        """Concrete scenario: 05 48 65 6C 6C 6F reads as "Hello"."""
        with BinaryReader(hello_bytes) as reader:
            assert reader.read_string() == "Hello"

        with BinaryReader(hello_bytes, encoding="latin-1") as reader:
            assert reader.read_string() == "Hello"

    def test_empty_string(self) -> None:
        """A zero prefix is the empty string and consumes one byte."""
        with BinaryReader(b"\x00\x07") as reader:
            assert reader.read_string() == ""
            assert reader.read_byte() == 7

    def test_consecutive_strings(self, mixed_text: str) -> None:
        """Each string consumes exactly its declared bytes."""
        data = _prefixed("first") + _prefixed(mixed_text) + _prefixed("")
        with BinaryReader(StreamSource(io.BytesIO(data))) as reader:
            assert reader.read_string() == "first"
            assert reader.read_string() == mixed_text
            assert reader.read_string() == ""

    def test_long_string_splits_characters(self) -> None:
        """Chunk boundaries inside a multi-byte character are decoded correctly."""
        text = "€" * 300 + "end"
        data = _prefixed(text)
        for source in (
            data,
            StreamSource(io.BytesIO(data)),
            FragmentedSource(data, FragmentedSourceConfig(pattern=(5, 128, 1))),
        ):
            with BinaryReader(source) as reader:
                assert reader.read_string() == text

    def test_utf16_string(self) -> None:
        """The prefix counts bytes, not characters."""
        data = _prefixed("Grüße 😀", "utf-16-le")
        with BinaryReader(data, encoding="utf-16-le") as reader:
            assert reader.read_string() == "Grüße 😀"

    def test_negative_length(self) -> None:
        """A prefix decoding to a negative int32 is a format error."""
        with BinaryReader(b"\xff\xff\xff\xff\x0f") as reader:
            with pytest.raises(FormatError, match="Invalid string length -1"):
                reader.read_string()

    def test_malformed_prefix(self) -> None:
        """A prefix longer than five bytes is a format error."""
        with BinaryReader(b"\x80\x80\x80\x80\x80\x01") as reader:
            with pytest.raises(FormatError):
                reader.read_string()

    def test_truncated_body(self) -> None:
        """Fewer bytes than declared raise EndOfInputError."""
        for source in (b"\x0aabc", FragmentedSource(b"\x0aabc")):
            with BinaryReader(source) as reader:
                with pytest.raises(EndOfInputError, match="declared 10 bytes"):
                    reader.read_string()

    def test_truncated_multichunk_body(self) -> None:
        """Truncation after the first chunk is also detected."""
        data = encode_7bit_int(200) + b"x" * 150
        with BinaryReader(StreamSource(io.BytesIO(data))) as reader:
            with pytest.raises(EndOfInputError, match="after 150"):
                reader.read_string()

    def test_invalid_bytes(self) -> None:
        """Undecodable bytes raise FormatError under strict handling."""
        with BinaryReader(b"\x02\xc3\x28") as reader:
            with pytest.raises(FormatError):
                reader.read_string()

    def test_invalid_bytes_replaced(self) -> None:
        """A lenient handler substitutes U+FFFD."""
        with BinaryReader(b"\x03a\xffb", errors="replace") as reader:
            assert reader.read_string() == "a\ufffdb"
