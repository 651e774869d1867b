"""Buffered binary reader.

This module provides BinaryReader, which decodes typed values from a byte source:
little-endian integers, IEEE-754 floats, decimals, booleans, 7-bit length-prefixed
strings, characters and raw byte blocks.

Fixed-width reads assemble exact byte counts in a small scratch buffer, looping
over partial reads. Character and string reads go through a stateful text decoder
so that a multi-byte character split across two reads is decoded exactly once.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, MutableSequence, Optional, Union

from .codec.decimal import DECIMAL_SIZE, decimal_from_bits
from .codec.text import TextDecoder, TextEncoding
from .codec.varint import read_7bit_int, to_int32
from .exceptions import EndOfInputError, FormatError, NotOpenError
from .options import ReaderOptions
from .source.base import ByteSource, ViewableSource
from .source.memory import MemorySource
from .source.stream import StreamSource

logger = logging.getLogger(__name__)

# Capacity of the byte buffer used by character and string reads.
MAX_CHAR_BYTES_SIZE = 128

# Smallest scratch buffer used by fixed-width reads (a decimal is 16 bytes).
MIN_BUFFER_SIZE = 16

_INT8 = struct.Struct("<b")
_INT16 = struct.Struct("<h")
_UINT16 = struct.Struct("<H")
_INT32 = struct.Struct("<i")
_UINT32 = struct.Struct("<I")
_INT64 = struct.Struct("<q")
_UINT64 = struct.Struct("<Q")
_FLOAT32 = struct.Struct("<f")
_FLOAT64 = struct.Struct("<d")

SourceLike = Union[ByteSource, bytes, bytearray, memoryview, Any]


@dataclass(frozen=True)
class _CharResult:
    """Outcome of decoding one character.

    Exactly one of the following holds:
        - char is set: a character was decoded
        - error is set: decoding failed; rewind_to is the position to restore
          and decoder_state the decoder state to restore (both None when the
          source cannot seek)
        - neither: the input ended before any byte was read
    """

    char: Optional[str] = None
    error: Optional[FormatError] = None
    rewind_to: Optional[int] = None
    decoder_state: Optional[tuple[bytes, int]] = None


def _as_source(source: SourceLike) -> ByteSource:
    if source is None:
        raise TypeError("source must not be None")
    if isinstance(source, ByteSource):
        if source.closed:
            raise ValueError("Source is closed")
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return MemorySource(source)
    if hasattr(source, "read"):
        return StreamSource(source)
    raise TypeError(
        f"Expected a ByteSource, bytes-like object or binary file, got {type(source).__name__}"
    )


def _end_of_input(detail: str) -> EndOfInputError:
    logger.debug("End of input: %s", detail)
    return EndOfInputError(f"Unable to read beyond the end of the input: {detail}")


class BinaryReader:
    """Reads primitive values from a byte source.

    The reader owns its source: close() (or leaving a ``with`` block) closes the
    source too, unless leave_open=True. A reader is not thread-safe; its scratch
    buffers and decoder state are mutated by every read.

    Args:
        source: A ByteSource, a bytes-like object, or a readable binary file object
        encoding: Text encoding for characters and strings (default "utf-8"),
            either a codec name or a TextEncoding
        leave_open: If True, close() leaves the source open
        errors: Codec error handler for text decoding (default "strict")

    Raises:
        TypeError: If source is not a supported type
        ValueError: If the source is not readable or the encoding is unknown

    Examples:
        ```python
        from binreader import BinaryReader

        with BinaryReader(b"\\x2a\\x00\\x00\\x00\\x05Hello") as reader:
            reader.read_int32()   # 42
            reader.read_string()  # "Hello"

        with open("save.dat", "rb") as f, BinaryReader(f, encoding="utf-16-le") as reader:
            header = reader.read_chars(4)
        ```
    """

    def __init__(
        self,
        source: SourceLike,
        encoding: str | TextEncoding = "utf-8",
        leave_open: bool = False,
        *,
        errors: str = "strict",
    ) -> None:
        if isinstance(encoding, TextEncoding):
            text_encoding = encoding
        else:
            text_encoding = TextEncoding.lookup(encoding, errors)

        self._source: ByteSource | None = _as_source(source)
        self._encoding = text_encoding
        self._decoder: TextDecoder | None = text_encoding.new_decoder()
        self._buffer: bytearray | None = bytearray(
            max(MIN_BUFFER_SIZE, text_encoding.max_bytes_per_char)
        )
        # Allocated on the first character or string read.
        self._char_bytes: bytearray | None = None
        # Characters decoded past what a character read asked for.
        self._char_surplus = ""

        self._two_bytes_per_char = text_encoding.two_bytes_per_char
        self._viewable = isinstance(self._source, ViewableSource)
        self._leave_open = leave_open

        logger.debug(
            "Opened BinaryReader over %s (encoding=%s, leave_open=%s)",
            type(self._source).__name__,
            text_encoding.name,
            leave_open,
        )

    @classmethod
    def from_options(cls, source: SourceLike, options: ReaderOptions) -> BinaryReader:
        """Create a reader from validated ReaderOptions."""
        return cls(source, options.text_encoding(), options.leave_open)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def source(self) -> ByteSource | None:
        """The underlying byte source, or None once closed."""
        return self._source

    @property
    def encoding(self) -> TextEncoding:
        return self._encoding

    @property
    def closed(self) -> bool:
        return self._source is None

    def close(self) -> None:
        """Release the source and discard all buffers.

        Closing an already closed reader does nothing.
        """
        source = self._source
        self._source = None
        try:
            if source is not None:
                if self._leave_open:
                    logger.debug("Detached BinaryReader, leaving %s open", type(source).__name__)
                else:
                    source.close()
                    logger.debug("Closed BinaryReader and its %s", type(source).__name__)
        finally:
            self._buffer = None
            self._char_bytes = None
            self._decoder = None
            self._char_surplus = ""

    def __enter__(self) -> BinaryReader:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else type(self._source).__name__
        return f"BinaryReader({state}, encoding={self._encoding.name!r})"

    def _ensure_open(self) -> ByteSource:
        if self._source is None:
            raise NotOpenError()
        return self._source

    def _ensure_char_bytes(self) -> bytearray:
        if self._char_bytes is None:
            self._char_bytes = bytearray(MAX_CHAR_BYTES_SIZE)
        return self._char_bytes

    # ------------------------------------------------------------------
    # Fixed-width primitives
    # ------------------------------------------------------------------

    def _fill_buffer(self, num_bytes: int) -> bytearray | memoryview:
        """Read exactly num_bytes and return a buffer holding them at offset 0.

        The returned buffer is the reader's scratch buffer (or a view into a
        viewable source) and is only valid until the next read.
        """
        source = self._ensure_open()
        buffer = self._buffer
        assert buffer is not None

        if num_bytes < 1 or num_bytes > len(buffer):
            raise ValueError(f"num_bytes must be 1-{len(buffer)}, got {num_bytes}")

        if num_bytes == 1:
            byte = source.read_byte()
            if byte == -1:
                raise _end_of_input("needed 1 byte, got 0")
            buffer[0] = byte
            return buffer

        if self._viewable:
            view = source.read_view(num_bytes)  # type: ignore[attr-defined]
            if len(view) < num_bytes:
                raise _end_of_input(f"needed {num_bytes} bytes, got {len(view)}")
            return view

        target = memoryview(buffer)
        bytes_read = 0
        while bytes_read < num_bytes:
            n = source.readinto(target[bytes_read:num_bytes])
            if n == 0:
                raise _end_of_input(f"needed {num_bytes} bytes, got {bytes_read}")
            bytes_read += n
        return buffer

    def read_boolean(self) -> bool:
        """Read one byte; any nonzero value is True."""
        return self._fill_buffer(1)[0] != 0

    def read_byte(self) -> int:
        """Read an unsigned 8-bit integer."""
        byte = self._ensure_open().read_byte()
        if byte == -1:
            raise _end_of_input("needed 1 byte, got 0")
        return byte

    def read_sbyte(self) -> int:
        """Read a signed 8-bit integer."""
        return _INT8.unpack_from(self._fill_buffer(1))[0]

    def read_int16(self) -> int:
        return _INT16.unpack_from(self._fill_buffer(2))[0]

    def read_uint16(self) -> int:
        return _UINT16.unpack_from(self._fill_buffer(2))[0]

    def read_int32(self) -> int:
        return _INT32.unpack_from(self._fill_buffer(4))[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack_from(self._fill_buffer(4))[0]

    def read_int64(self) -> int:
        return _INT64.unpack_from(self._fill_buffer(8))[0]

    def read_uint64(self) -> int:
        return _UINT64.unpack_from(self._fill_buffer(8))[0]

    def read_single(self) -> float:
        """Read an IEEE-754 binary32 value (returned as a Python float)."""
        return _FLOAT32.unpack_from(self._fill_buffer(4))[0]

    def read_double(self) -> float:
        """Read an IEEE-754 binary64 value."""
        return _FLOAT64.unpack_from(self._fill_buffer(8))[0]

    def read_decimal(self) -> Decimal:
        """Read a 16-byte decimal.

        Raises:
            FormatError: If the flags word has reserved bits set or the scale
                exceeds 28
            EndOfInputError: If fewer than 16 bytes remain
        """
        buffer = self._fill_buffer(DECIMAL_SIZE)
        try:
            return decimal_from_bits(buffer)
        except ValueError as e:
            raise FormatError(f"Invalid decimal bit pattern: {e}") from e

    def read_7bit_encoded_int(self) -> int:
        """Read a variable-length integer (at most 5 bytes).

        Returns:
            The value interpreted as a signed 32-bit integer

        Raises:
            FormatError: If more than 5 bytes carry the continuation bit
            EndOfInputError: If the input ends inside the integer
        """
        return to_int32(read_7bit_int(self.read_byte))

    # ------------------------------------------------------------------
    # Characters and strings
    # ------------------------------------------------------------------

    def _take_surplus(self, count: int) -> str:
        taken = self._char_surplus[:count]
        self._char_surplus = self._char_surplus[count:]
        return taken

    def _decode_one_char(self, source: ByteSource, decoder: TextDecoder) -> _CharResult:
        if source.seekable():
            start: Optional[int] = source.tell()
            state: Optional[tuple[bytes, int]] = decoder.getstate()
        else:
            start = state = None
        char_bytes = self._ensure_char_bytes()
        consumed = 0

        while True:
            # One byte can be one character unless every character takes two.
            num_bytes = 2 if self._two_bytes_per_char else 1

            byte = source.read_byte()
            if byte == -1:
                num_bytes = 0
            else:
                char_bytes[0] = byte
            if num_bytes == 2:
                byte = source.read_byte()
                if byte == -1:
                    num_bytes = 1
                else:
                    char_bytes[1] = byte

            try:
                if num_bytes == 0:
                    if consumed == 0:
                        return _CharResult()
                    # Flush: a strict decoder raises on the incomplete sequence.
                    chars = decoder.decode(b"", final=True)
                    if not chars:
                        return _CharResult()
                else:
                    consumed += num_bytes
                    chars = decoder.decode(memoryview(char_bytes)[:num_bytes])
            except FormatError as e:
                return _CharResult(error=e, rewind_to=start, decoder_state=state)

            if chars:
                self._char_surplus = chars[1:]
                return _CharResult(char=chars[0])

    def read_one_char(self) -> str | None:
        """Read the next character.

        Returns:
            The character, or None if the input is already exhausted

        Raises:
            FormatError: If the bytes do not decode. A seekable source is rewound
                to the start of the failed character first; on a non-seekable
                source the bytes are consumed and the stream position afterwards
                is undefined.
        """
        source = self._ensure_open()
        if self._char_surplus:
            return self._take_surplus(1)

        decoder = self._decoder
        assert decoder is not None
        result = self._decode_one_char(source, decoder)
        if result.error is not None:
            if result.rewind_to is not None:
                logger.debug("Character decode failed, rewinding source to %d", result.rewind_to)
                source.seek(result.rewind_to)
                assert result.decoder_state is not None
                decoder.setstate(result.decoder_state)
            raise result.error
        return result.char

    def read_char(self) -> str:
        """Read the next character, raising EndOfInputError at end of input."""
        char = self.read_one_char()
        if char is None:
            raise _end_of_input("no character available")
        return char

    def peek_char(self) -> str | None:
        """Return the next character without consuming it.

        Returns None at end of input and always on non-seekable sources.
        """
        source = self._ensure_open()
        if self._char_surplus:
            return self._char_surplus[0]
        if not source.seekable():
            return None

        decoder = self._decoder
        assert decoder is not None
        position = source.tell()
        state = decoder.getstate()
        try:
            return self.read_one_char()
        finally:
            source.seek(position)
            decoder.setstate(state)
            self._char_surplus = ""

    def _read_chars(self, count: int) -> str:
        source = self._ensure_open()
        decoder = self._decoder
        assert decoder is not None

        parts: list[str] = []
        remaining = count
        if self._char_surplus:
            taken = self._take_surplus(remaining)
            parts.append(taken)
            remaining -= len(taken)

        char_bytes = self._ensure_char_bytes()
        while remaining > 0:
            # At best one byte (two for UTF-16) per character; a pending partial
            # sequence already holds at least one of the bytes needed.
            num_bytes = remaining
            if self._two_bytes_per_char:
                num_bytes <<= 1
            if decoder.has_pending and num_bytes > 1:
                num_bytes -= 1
            if num_bytes > MAX_CHAR_BYTES_SIZE:
                num_bytes = MAX_CHAR_BYTES_SIZE

            if self._viewable:
                chunk = source.read_view(num_bytes)  # type: ignore[attr-defined]
            else:
                n = source.readinto(memoryview(char_bytes)[:num_bytes])
                chunk = memoryview(char_bytes)[:n]

            if len(chunk) == 0:
                break

            chars = decoder.decode(chunk)
            if len(chars) > remaining:
                self._char_surplus = chars[remaining:]
                chars = chars[:remaining]
            parts.append(chars)
            remaining -= len(chars)

        return "".join(parts)

    def read_chars(self, count: int) -> str:
        """Read up to count characters.

        Args:
            count: Number of characters wanted

        Returns:
            The characters read; shorter than count only at end of input

        Raises:
            ValueError: If count is negative
            FormatError: If the bytes do not decode under a strict error handler
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self._ensure_open()
        if count == 0:
            return ""
        return self._read_chars(count)

    def readinto_chars(
        self, buffer: MutableSequence[str], index: int = 0, count: int | None = None
    ) -> int:
        """Read up to count characters into buffer starting at index.

        Args:
            buffer: Mutable sequence of single-character strings (a list, or an
                array with a character typecode)
            index: First position of buffer to write
            count: Characters wanted (default: the rest of buffer)

        Returns:
            Number of characters written

        Raises:
            ValueError: If index/count are negative or exceed the buffer
        """
        if index < 0:
            raise ValueError(f"index must be >= 0, got {index}")
        if count is None:
            count = len(buffer) - index
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if len(buffer) - index < count:
            raise ValueError(
                f"Buffer of length {len(buffer)} cannot hold {count} characters at index {index}"
            )
        self._ensure_open()

        chars = self._read_chars(count) if count else ""
        for offset, char in enumerate(chars):
            buffer[index + offset] = char
        return len(chars)

    def read_string(self) -> str:
        """Read a string prefixed with its byte length as a 7-bit encoded integer.

        Raises:
            FormatError: If the length prefix is malformed or negative, or the
                bytes do not decode under a strict error handler
            EndOfInputError: If the input holds fewer bytes than the prefix declares
        """
        source = self._ensure_open()

        string_length = self.read_7bit_encoded_int()
        if string_length < 0:
            raise FormatError(f"Invalid string length {string_length}")
        if string_length == 0:
            return ""

        decoder = self._decoder
        assert decoder is not None
        char_bytes = self._ensure_char_bytes()

        parts: list[str] | None = None
        current = 0
        while current < string_length:
            read_length = min(string_length - current, MAX_CHAR_BYTES_SIZE)

            if self._viewable:
                chunk = source.read_view(read_length)  # type: ignore[attr-defined]
            else:
                n = source.readinto(memoryview(char_bytes)[:read_length])
                chunk = memoryview(char_bytes)[:n]

            if len(chunk) == 0:
                raise _end_of_input(
                    f"string declared {string_length} bytes, input ended after {current}"
                )

            chars = decoder.decode(chunk)
            if current == 0 and len(chunk) == string_length:
                return chars

            if parts is None:
                parts = []
            parts.append(chars)
            current += len(chunk)

        return "".join(parts)

    # ------------------------------------------------------------------
    # Byte blocks
    # ------------------------------------------------------------------

    def read_bytes(self, count: int) -> bytes:
        """Read up to count bytes.

        Returns:
            The bytes read; shorter than count only at end of input

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        source = self._ensure_open()
        if count == 0:
            return b""

        if self._viewable:
            return bytes(source.read_view(count))  # type: ignore[attr-defined]

        result = bytearray(count)
        num_read = 0
        with memoryview(result) as view:
            while num_read < count:
                n = source.readinto(view[num_read:])
                if n == 0:
                    break
                num_read += n

        if num_read != count:
            del result[num_read:]
        return bytes(result)

    def readinto(self, buffer: Any, offset: int = 0, count: int | None = None) -> int:
        """Read up to count bytes into buffer starting at offset.

        Args:
            buffer: Writable bytes-like object (bytearray, memoryview, array, ...)
            offset: First byte of buffer to write
            count: Bytes wanted (default: the rest of buffer)

        Returns:
            Number of bytes written; less than count only at end of input

        Raises:
            TypeError: If buffer is not a writable bytes-like object
            ValueError: If offset/count are negative or exceed the buffer
        """
        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise TypeError("readinto() requires a writable buffer")
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        if count is None:
            count = len(view) - offset
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if offset + count > len(view):
            raise ValueError(
                f"Buffer of {len(view)} bytes cannot hold {count} bytes at offset {offset}"
            )
        source = self._ensure_open()

        num_read = 0
        while num_read < count:
            n = source.readinto(view[offset + num_read : offset + count])
            if n == 0:
                break
            num_read += n
        return num_read
