"""In-memory byte source."""

from __future__ import annotations

from .base import ByteSource


class MemorySource(ByteSource):
    """Byte source over a bytes-like object held in memory.

    Always seekable, and implements read_view() so BinaryReader can decode
    directly from the underlying storage.

    Example:
        >>> source = MemorySource(b"\\x2a\\x00\\x00\\x00")
        >>> bytes(source.read_view(2))
        b'*\\x00'
        >>> source.tell()
        2
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        super().__init__()
        self._data = memoryview(data).cast("B")
        self._position = 0

    def __len__(self) -> int:
        return len(self._data)

    def remaining(self) -> int:
        """Number of unread bytes."""
        return max(0, len(self._data) - self._position)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        view = self.read_view(len(buffer))
        count = len(view)
        memoryview(buffer)[:count] = view
        return count

    def read_byte(self) -> int:
        if self._position >= len(self._data):
            return -1
        byte = self._data[self._position]
        self._position += 1
        return byte

    def read_view(self, count: int) -> memoryview:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        start = min(self._position, len(self._data))
        end = min(start + count, len(self._data))
        self._position = end
        return self._data[start:end]

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._position

    def seek(self, position: int) -> int:
        if position < 0:
            raise ValueError(f"Negative seek position {position}")
        self._position = position
        return self._position

    def close(self) -> None:
        if not self._closed:
            self._data = memoryview(b"")
            self._position = 0
        super().close()
