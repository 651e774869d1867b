"""Exception hierarchy for binreader.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BinReaderError for easy catching of any binreader-specific error.

Argument errors (negative counts, undersized destination buffers) are not part of
this hierarchy: they are raised as plain ValueError/TypeError before any I/O happens.
"""

from __future__ import annotations


class BinReaderError(Exception):
    """Base exception for all binreader errors."""

    pass


class NotOpenError(BinReaderError, ValueError):
    """Raised when a read is attempted on a closed reader.

    This is a usage error, not a data error, and is never retryable. It is also a
    ValueError so that it matches Python's "I/O operation on closed file" convention.
    """

    def __init__(self, message: str = "Cannot read from a closed BinaryReader") -> None:
        super().__init__(message)


class EndOfInputError(BinReaderError, EOFError):
    """Raised when the source is exhausted before an exact-count read completes.

    Examples:
        - Fewer than 4 bytes remain for read_int32()
        - A length-prefixed string declares more bytes than the source holds
        - The source ends in the middle of a variable-length integer

    Bulk reads (read_bytes, read_chars) never raise this: running out of input
    there produces a short result instead.
    """

    pass


class FormatError(BinReaderError):
    """Raised when bytes were read but do not form a valid value.

    Examples:
        - Variable-length integer longer than 5 bytes
        - Negative string length prefix
        - Decimal with reserved bits set or scale above 28
        - Invalid or truncated multi-byte character under a strict error handler
    """

    pass
