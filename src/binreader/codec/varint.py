"""Variable-length integer codec.

Non-negative integers are written 7 bits per byte, low-order group first. The high
bit of every byte except the last is set to signal that more bytes follow:

    0x7F        -> 7F
    0x80        -> 80 01
    0x3FFF      -> FF 7F
    0xFFFFFFFF  -> FF FF FF FF 0F

A 32-bit value never needs more than 5 bytes, so decoders reject longer encodings.
Decoding yields the unsigned value; to_int32() reinterprets it where a signed
length is wanted.
"""

from __future__ import annotations

from typing import Callable

from ..exceptions import EndOfInputError, FormatError

MAX_7BIT_INT_BYTES = 5

_INT32_MIN = -(1 << 31)
_UINT32_MAX = (1 << 32) - 1


def to_int32(value: int) -> int:
    """Reinterpret the low 32 bits of value as a signed 32-bit integer."""
    value &= _UINT32_MAX
    if value & 0x80000000:
        return value - (1 << 32)
    return value


def encode_7bit_int(value: int) -> bytes:
    """Encode a 32-bit integer as a variable-length integer.

    Negative values are written as their unsigned 32-bit two's complement, which
    always takes 5 bytes. BinaryReader.read_7bit_encoded_int() reads it back as
    the same negative value.

    Args:
        value: Integer in the range -2**31 .. 2**32 - 1

    Returns:
        1 to 5 encoded bytes

    Raises:
        ValueError: If value does not fit in 32 bits

    Example:
        >>> encode_7bit_int(128)
        b'\\x80\\x01'
    """
    if value < _INT32_MIN or value > _UINT32_MAX:
        raise ValueError(f"Value {value} does not fit in 32 bits")

    remaining = value & _UINT32_MAX
    result = bytearray()
    while remaining >= 0x80:
        result.append((remaining & 0x7F) | 0x80)
        remaining >>= 7
    result.append(remaining)
    return bytes(result)


def encoded_7bit_size(value: int) -> int:
    """Return the number of bytes encode_7bit_int(value) produces."""
    return len(encode_7bit_int(value))


def read_7bit_int(read_byte: Callable[[], int]) -> int:
    """Decode a variable-length integer from a byte-at-a-time reader.

    Args:
        read_byte: Callable returning the next byte (0-255). It must raise
            EndOfInputError when the input is exhausted.

    Returns:
        The decoded value as an unsigned 32-bit integer (0 .. 2**32 - 1)

    Raises:
        FormatError: If more than 5 bytes carry the continuation bit
        EndOfInputError: Propagated unchanged from read_byte
    """
    result = 0
    shift = 0
    while True:
        if shift == MAX_7BIT_INT_BYTES * 7:
            raise FormatError(
                f"Too many bytes in what should have been a 7-bit encoded integer "
                f"(max {MAX_7BIT_INT_BYTES})"
            )

        byte = read_byte()
        result |= (byte & 0x7F) << shift
        shift += 7
        if not byte & 0x80:
            break

    return result & _UINT32_MAX


def decode_7bit_int(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a variable-length integer from a bytes-like object.

    Args:
        data: Buffer containing the encoded integer
        offset: Position of the first encoded byte

    Returns:
        Tuple of (unsigned value, bytes_consumed)

    Raises:
        FormatError: If the encoding is longer than 5 bytes
        EndOfInputError: If data ends before the final byte

    Example:
        >>> decode_7bit_int(b"\\x80\\x01")
        (128, 2)
    """
    position = offset

    def _next() -> int:
        nonlocal position
        if position >= len(data):
            raise EndOfInputError(
                f"Truncated 7-bit encoded integer: ran out of data after {position - offset} bytes"
            )
        byte = data[position]
        position += 1
        return byte

    value = read_7bit_int(_next)
    return value, position - offset
