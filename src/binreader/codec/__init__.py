"""Wire-level codecs for binreader.

This module provides the variable-length integer codec, the 16-byte decimal
layout, and the stateful text decoder used by BinaryReader.
"""

from __future__ import annotations

from .decimal import DECIMAL_SIZE, decimal_from_bits, decimal_to_bits
from .text import TextDecoder, TextEncoding
from .varint import (
    MAX_7BIT_INT_BYTES,
    decode_7bit_int,
    encode_7bit_int,
    encoded_7bit_size,
    read_7bit_int,
    to_int32,
)

__all__ = [
    "DECIMAL_SIZE",
    "decimal_from_bits",
    "decimal_to_bits",
    "TextDecoder",
    "TextEncoding",
    "MAX_7BIT_INT_BYTES",
    "decode_7bit_int",
    "encode_7bit_int",
    "encoded_7bit_size",
    "read_7bit_int",
    "to_int32",
]
