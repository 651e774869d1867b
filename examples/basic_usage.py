#!/usr/bin/env python3
"""Basic usage example for binreader.

This example demonstrates:
1. Reading fixed-width integers and floats
2. Reading length-prefixed strings
3. Reading characters in different encodings
4. Handling malformed input
"""

from __future__ import annotations

import io
import struct
from decimal import Decimal

from binreader import (
    BinaryReader,
    FormatError,
    ReaderOptions,
    decimal_to_bits,
    encode_7bit_int,
)


def build_sample() -> bytes:
    """Lay out a small record the way a .NET BinaryWriter would."""
    name = "Depth gauge €".encode("utf-8")
    return (
        struct.pack("<i", 42)
        + struct.pack("<?", True)
        + struct.pack("<d", 1013.25)
        + decimal_to_bits(Decimal("19.99"))
        + encode_7bit_int(len(name))
        + name
    )


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("binreader Basic Usage Example")
    print("=" * 60)
    print()

    data = build_sample()
    print(f"1. Sample record: {len(data)} bytes")
    print(f"   Hex: {data.hex()}")
    print()

    # Read the record back field by field
    print("2. Reading fields in order...")
    with BinaryReader(io.BytesIO(data)) as reader:
        print(f"   int32:   {reader.read_int32()}")
        print(f"   bool:    {reader.read_boolean()}")
        print(f"   double:  {reader.read_double()}")
        print(f"   decimal: {reader.read_decimal()}")
        print(f"   string:  {reader.read_string()!r}")
    print()

    # Characters in a two-byte encoding
    print("3. Reading UTF-16 characters...")
    options = ReaderOptions(encoding="utf-16-le")
    with BinaryReader.from_options("Hi 😀".encode("utf-16-le"), options) as reader:
        print(f"   peek:  {reader.peek_char()!r}")
        print(f"   chars: {reader.read_chars(4)!r}")
    print()

    # Malformed input
    print("4. Handling malformed input...")
    with BinaryReader(b"\x80\x80\x80\x80\x80\x01") as reader:
        try:
            reader.read_7bit_encoded_int()
        except FormatError as e:
            print(f"   ✓ Rejected overlong length prefix: {e}")

    with BinaryReader(b"\x02\xc3\x28", errors="replace") as reader:
        print(f"   Lenient decode: {reader.read_string()!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
