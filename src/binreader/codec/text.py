"""Text encoding properties and the stateful text decoder.

Any codec registered with Python's ``codecs`` module can be used. A TextDecoder
wraps the codec's incremental decoder, so a multi-byte character whose bytes
arrive in two separate reads is held as pending state and completed on the next
call instead of being lost or decoded twice.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass

from ..exceptions import FormatError

# Codecs that always use two bytes per BMP character.
_TWO_BYTE_CODECS = frozenset({"utf-16", "utf-16-le", "utf-16-be"})

# Characters from every UTF-8 length class plus the largest code point.
_PROBE_CHARS = ("A", "\xff", "\u07ff", "\uffff", "\U0010ffff")


@dataclass(frozen=True)
class TextEncoding:
    """A validated text encoding choice.

    Attributes:
        name: Canonical codec name as reported by codecs.lookup()
        errors: Codec error handler used when decoding ("strict", "replace", ...)
    """

    name: str
    errors: str = "strict"

    @classmethod
    def lookup(cls, encoding: str, errors: str = "strict") -> TextEncoding:
        """Resolve an encoding name and error handler.

        Args:
            encoding: Any name or alias accepted by codecs.lookup()
            errors: Name of a registered codec error handler

        Returns:
            TextEncoding with the canonical codec name

        Raises:
            ValueError: If the encoding or error handler is unknown
        """
        try:
            info = codecs.lookup(encoding)
        except LookupError as e:
            raise ValueError(f"Unknown text encoding: {encoding!r}") from e

        try:
            codecs.lookup_error(errors)
        except LookupError as e:
            raise ValueError(f"Unknown codec error handler: {errors!r}") from e

        return cls(name=info.name, errors=errors)

    @property
    def two_bytes_per_char(self) -> bool:
        """True for UTF-16 variants, where every BMP character is exactly 2 bytes."""
        return self.name in _TWO_BYTE_CODECS

    @property
    def max_bytes_per_char(self) -> int:
        """Upper bound on the bytes this encoding writes for a single character.

        Includes any byte order mark the encoder emits on first use.
        """
        longest = 1
        for char in _PROBE_CHARS:
            try:
                encoded = char.encode(self.name, errors="ignore")
            except UnicodeError:
                continue
            longest = max(longest, len(encoded))
        return longest

    def new_decoder(self) -> TextDecoder:
        """Create a fresh decoder with no pending state."""
        return TextDecoder(self)


class TextDecoder:
    """Stateful byte-to-character decoder.

    Bytes that end in the middle of a multi-byte character are retained until the
    next decode() call. The pending state is only dropped by reset() or by a
    decode failure, and can be saved and restored with getstate()/setstate().

    Example:
        >>> decoder = TextEncoding.lookup("utf-8").new_decoder()
        >>> decoder.decode(b"\\xe2\\x82")
        ''
        >>> decoder.has_pending
        True
        >>> decoder.decode(b"\\xac")
        '€'
    """

    def __init__(self, encoding: TextEncoding) -> None:
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding.name)(encoding.errors)

    @property
    def has_pending(self) -> bool:
        """True if a partial multi-byte sequence is waiting for more bytes."""
        buffered, _flag = self._decoder.getstate()
        return len(buffered) > 0

    def decode(self, data: bytes | bytearray | memoryview, final: bool = False) -> str:
        """Decode data, keeping any trailing partial character as pending state.

        Args:
            data: Bytes to decode
            final: If True, flush pending state; an incomplete trailing
                sequence is then a decode error

        Returns:
            Decoded characters (possibly empty)

        Raises:
            FormatError: If the bytes are invalid for the encoding under the
                configured error handler. The decoder is reset.
        """
        try:
            return self._decoder.decode(data, final)
        except UnicodeDecodeError as e:
            self._decoder.reset()
            raise FormatError(f"Invalid {self.encoding.name} byte sequence: {e.reason}") from e

    def getstate(self) -> tuple[bytes, int]:
        """Snapshot the pending state, for restoring with setstate()."""
        return self._decoder.getstate()

    def setstate(self, state: tuple[bytes, int]) -> None:
        self._decoder.setstate(state)

    def reset(self) -> None:
        """Discard any pending partial sequence."""
        self._decoder.reset()
