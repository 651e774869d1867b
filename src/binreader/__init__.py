"""binreader: Buffered Binary Decoder

A Python library for reading typed values out of arbitrary byte sources:
little-endian integers, IEEE-754 floats, 16-byte decimals, booleans, characters,
raw byte blocks and 7-bit length-prefixed strings.

Key Features:
- Correct over sources that return partial reads (sockets, pipes, decompressors)
- Stateful text decoding: multi-byte characters split across reads decode once
- Any text encoding from Python's codecs registry
- Zero-copy fast path for in-memory sources

Quick Start:
    >>> from binreader import BinaryReader
    >>>
    >>> data = b"\\x2a\\x00\\x00\\x00\\x05Hello"
    >>> with BinaryReader(data) as reader:
    ...     reader.read_int32()
    ...     reader.read_string()
    42
    'Hello'
"""

from __future__ import annotations

from .codec import (
    decimal_from_bits,
    decimal_to_bits,
    decode_7bit_int,
    encode_7bit_int,
    encoded_7bit_size,
    TextDecoder,
    TextEncoding,
)
from .exceptions import BinReaderError, EndOfInputError, FormatError, NotOpenError
from .options import ReaderOptions
from .reader import MAX_CHAR_BYTES_SIZE, MIN_BUFFER_SIZE, BinaryReader
from .source import (
    ByteSource,
    FragmentedSource,
    FragmentedSourceConfig,
    MemorySource,
    StreamSource,
    ViewableSource,
)

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BinaryReader",
    "ReaderOptions",
    "MAX_CHAR_BYTES_SIZE",
    "MIN_BUFFER_SIZE",
    # Exceptions
    "BinReaderError",
    "NotOpenError",
    "EndOfInputError",
    "FormatError",
    # Sources
    "ByteSource",
    "ViewableSource",
    "MemorySource",
    "StreamSource",
    "FragmentedSource",
    "FragmentedSourceConfig",
    # Codecs
    "TextEncoding",
    "TextDecoder",
    "encode_7bit_int",
    "decode_7bit_int",
    "encoded_7bit_size",
    "decimal_from_bits",
    "decimal_to_bits",
    # Version
    "__version__",
]
