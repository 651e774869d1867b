"""Byte source adapter for Python binary file objects."""

from __future__ import annotations

from typing import IO, Any

from .base import ByteSource


class StreamSource(ByteSource):
    """Byte source wrapping a binary file-like object.

    Works with files opened in ``"rb"`` mode, ``io.BytesIO``, sockets made into
    files with ``makefile("rb")``, or any object with ``read()``. ``readinto()`` is
    used when the object provides it.

    Attributes:
        fileobj: The wrapped object

    Example:
        >>> import io
        >>> source = StreamSource(io.BytesIO(b"abc"))
        >>> source.read_byte()
        97
    """

    def __init__(self, fileobj: IO[bytes] | Any) -> None:
        super().__init__()
        if not hasattr(fileobj, "read"):
            raise TypeError(f"{type(fileobj).__name__} has no read() method")
        readable = getattr(fileobj, "readable", None)
        if readable is not None and not readable():
            raise ValueError("Stream is not readable")
        self.fileobj = fileobj
        self._has_readinto = hasattr(fileobj, "readinto")

    def readinto(self, buffer: bytearray | memoryview) -> int:
        if self._has_readinto:
            count = self.fileobj.readinto(buffer)
            # Non-blocking raw streams return None when no data is ready.
            return count or 0

        data = self.fileobj.read(len(buffer))
        if not data:
            return 0
        count = len(data)
        memoryview(buffer)[:count] = data
        return count

    def read_byte(self) -> int:
        data = self.fileobj.read(1)
        if not data:
            return -1
        return data[0]

    def seekable(self) -> bool:
        seekable = getattr(self.fileobj, "seekable", None)
        return bool(seekable()) if seekable is not None else False

    def tell(self) -> int:
        if not self.seekable():
            return super().tell()
        return int(self.fileobj.tell())

    def seek(self, position: int) -> int:
        if not self.seekable():
            return super().seek(position)
        return int(self.fileobj.seek(position))

    @property
    def closed(self) -> bool:
        return self._closed or bool(getattr(self.fileobj, "closed", False))

    def close(self) -> None:
        if not self._closed:
            self.fileobj.close()
        super().close()
