"""16-byte decimal bit layout.

A decimal occupies four little-endian 32-bit words:

    [lo] [mid] [hi] [flags]

``lo``, ``mid`` and ``hi`` form an unsigned 96-bit mantissa (``hi`` is the most
significant word). In ``flags``, bits 16-23 hold the scale (a power of ten
divisor, 0-28) and bit 31 holds the sign. All other flag bits must be zero.
"""

from __future__ import annotations

import struct
from decimal import Decimal

DECIMAL_SIZE = 16
MAX_SCALE = 28

_SIGN_MASK = 0x80000000
_SCALE_MASK = 0x00FF0000
_SCALE_SHIFT = 16
_MANTISSA_LIMIT = 1 << 96

_LAYOUT = struct.Struct("<IIII")


def decimal_from_bits(data: bytes | bytearray | memoryview) -> Decimal:
    """Build a Decimal from its 16-byte representation.

    The value is constructed from a digit tuple, so no context rounding is applied
    even for 29-digit mantissas.

    Args:
        data: At least 16 bytes; only the first 16 are used

    Returns:
        The exact decimal value

    Raises:
        ValueError: If the reserved flag bits are set or the scale exceeds 28
    """
    if len(data) < DECIMAL_SIZE:
        raise ValueError(f"Decimal requires {DECIMAL_SIZE} bytes, got {len(data)}")

    lo, mid, hi, flags = _LAYOUT.unpack_from(data, 0)

    if flags & ~(_SIGN_MASK | _SCALE_MASK):
        raise ValueError(f"Decimal flags 0x{flags:08X} have reserved bits set")

    scale = (flags & _SCALE_MASK) >> _SCALE_SHIFT
    if scale > MAX_SCALE:
        raise ValueError(f"Decimal scale {scale} exceeds maximum of {MAX_SCALE}")

    mantissa = (hi << 64) | (mid << 32) | lo
    sign = 1 if flags & _SIGN_MASK else 0
    digits = tuple(int(d) for d in str(mantissa))
    return Decimal((sign, digits, -scale))


def decimal_to_bits(value: Decimal | int | str) -> bytes:
    """Encode a value into the 16-byte decimal layout.

    Args:
        value: Decimal (or anything Decimal() accepts) with at most 28 fractional
            digits and a mantissa below 2**96

    Returns:
        16 bytes

    Raises:
        ValueError: If the value is not finite or not representable in the layout

    Example:
        >>> decimal_to_bits(Decimal("1.5"))[:4]
        b'\\x0f\\x00\\x00\\x00'
    """
    dec = value if isinstance(value, Decimal) else Decimal(value)
    if not dec.is_finite():
        raise ValueError(f"Cannot encode non-finite decimal {dec}")

    sign, digits, exponent = dec.as_tuple()
    assert isinstance(exponent, int)
    mantissa = int("".join(str(d) for d in digits)) if digits else 0

    if exponent > 0:
        mantissa *= 10**exponent
        scale = 0
    else:
        scale = -exponent

    if scale > MAX_SCALE:
        raise ValueError(f"Decimal {dec} has scale {scale}, maximum is {MAX_SCALE}")
    if mantissa >= _MANTISSA_LIMIT:
        raise ValueError(f"Decimal {dec} mantissa does not fit in 96 bits")

    flags = (scale << _SCALE_SHIFT) | (_SIGN_MASK if sign else 0)
    return _LAYOUT.pack(
        mantissa & 0xFFFFFFFF,
        (mantissa >> 32) & 0xFFFFFFFF,
        (mantissa >> 64) & 0xFFFFFFFF,
        flags,
    )
