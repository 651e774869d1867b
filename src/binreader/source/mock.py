"""Fragmenting byte source for exercising partial-read handling.

Real streams (sockets, pipes, decompressors) routinely return fewer bytes than
requested. FragmentedSource reproduces that deterministically: every read hands
out at most one fragment, sized by FragmentedSourceConfig.
"""

from __future__ import annotations

from itertools import cycle
from typing import Iterator

from .base import ByteSource
from .config import FragmentedSourceConfig


class FragmentedSource(ByteSource):
    """Byte source that delivers its data in small fragments.

    Attributes:
        config: Fragmenting configuration
        read_calls: Number of readinto()/read_byte() calls made so far

    Examples:
        ```python
        from binreader import BinaryReader
        from binreader.source import FragmentedSource, FragmentedSourceConfig

        data = b"\\x2a\\x00\\x00\\x00"
        source = FragmentedSource(data, FragmentedSourceConfig(max_fragment_size=1))
        with BinaryReader(source) as reader:
            assert reader.read_int32() == 42
        assert source.read_calls == 4
        ```
    """

    def __init__(
        self, data: bytes | bytearray, config: FragmentedSourceConfig | None = None
    ) -> None:
        super().__init__()
        self.config = config if config is not None else FragmentedSourceConfig()
        self._data = bytes(data)
        self._position = 0
        self.read_calls = 0
        self._sizes = self._fragment_sizes()

    def _fragment_sizes(self) -> Iterator[int]:
        if self.config.pattern is not None:
            return cycle(self.config.pattern)
        return cycle((self.config.max_fragment_size,))

    def remaining(self) -> int:
        """Number of unread bytes."""
        return max(0, len(self._data) - self._position)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        self.read_calls += 1
        count = min(len(buffer), next(self._sizes), self.remaining())
        if count <= 0:
            return 0
        memoryview(buffer)[:count] = self._data[self._position : self._position + count]
        self._position += count
        return count

    def read_byte(self) -> int:
        self.read_calls += 1
        if self._position >= len(self._data):
            return -1
        byte = self._data[self._position]
        self._position += 1
        return byte

    def seekable(self) -> bool:
        return self.config.seekable

    def tell(self) -> int:
        if not self.config.seekable:
            return super().tell()
        return self._position

    def seek(self, position: int) -> int:
        if not self.config.seekable:
            return super().seek(position)
        if position < 0:
            raise ValueError(f"Negative seek position {position}")
        self._position = position
        return self._position
