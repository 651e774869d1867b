"""Abstract interface for byte sources.

A byte source is anything BinaryReader can pull raw bytes from. The contract is
deliberately small:

- readinto() may return fewer bytes than requested; 0 means end of input
- seeking is optional and only used to rewind after a failed character decode
- close() releases whatever the source wraps

Sources that already hold their bytes contiguously in memory can additionally
implement the ViewableSource capability so the reader can decode straight from
their storage instead of copying into its scratch buffers.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


class ByteSource(ABC):
    """Abstract blocking, possibly-partial byte source.

    Implementations include:

    - **StreamSource**: wraps a Python binary file object
    - **MemorySource**: in-memory bytes, seekable and viewable
    - **FragmentedSource**: test double delivering bytes in small fragments

    Examples:
        ```python
        class CountingSource(ByteSource):
            def __init__(self, limit: int) -> None:
                super().__init__()
                self._next = 0
                self._limit = limit

            def readinto(self, buffer) -> int:
                view = memoryview(buffer)
                count = min(len(view), self._limit - self._next)
                for i in range(count):
                    view[i] = (self._next + i) & 0xFF
                self._next += count
                return count
        ```
    """

    def __init__(self) -> None:
        self._closed = False

    @abstractmethod
    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read up to len(buffer) bytes into buffer.

        Args:
            buffer: Writable destination

        Returns:
            Number of bytes written (0 at end of input, never an error by itself)
        """
        pass

    def read(self, buffer: bytearray | memoryview, offset: int, count: int) -> int:
        """Read up to count bytes into buffer starting at offset.

        Args:
            buffer: Writable destination
            offset: First index of buffer to write
            count: Maximum number of bytes to read

        Returns:
            Number of bytes read, 0 <= n <= count

        Raises:
            ValueError: If offset/count fall outside buffer
        """
        if offset < 0 or count < 0 or offset + count > len(buffer):
            raise ValueError(
                f"Invalid range offset={offset}, count={count} for buffer of {len(buffer)} bytes"
            )
        if count == 0:
            return 0
        return self.readinto(memoryview(buffer)[offset : offset + count])

    def read_byte(self) -> int:
        """Read a single byte.

        Returns:
            Byte value 0-255, or -1 at end of input
        """
        one = bytearray(1)
        if self.readinto(one) == 0:
            return -1
        return one[0]

    def seekable(self) -> bool:
        """Return True if tell() and seek() are supported."""
        return False

    def tell(self) -> int:
        """Return the current read position.

        Raises:
            io.UnsupportedOperation: If the source is not seekable
        """
        raise io.UnsupportedOperation(f"{type(self).__name__} is not seekable")

    def seek(self, position: int) -> int:
        """Move the read position to an absolute offset.

        Raises:
            io.UnsupportedOperation: If the source is not seekable
        """
        raise io.UnsupportedOperation(f"{type(self).__name__} is not seekable")

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the source. Calling close() more than once is allowed."""
        self._closed = True


@runtime_checkable
class ViewableSource(Protocol):
    """Optional capability: zero-copy access to the next bytes of a source."""

    def read_view(self, count: int) -> memoryview:
        """Return a view of up to count next bytes and advance past them.

        A view shorter than count means the source is exhausted.
        """
        ...
