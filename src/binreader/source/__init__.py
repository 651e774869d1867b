"""Byte sources for binreader.

This module provides the abstract ByteSource contract, the optional
ViewableSource capability, and the shipped adapters:

- **StreamSource**: any Python binary file object
- **MemorySource**: in-memory bytes (seekable, viewable)
- **FragmentedSource**: deterministic partial reads, for tests and demos
"""

from binreader.source.base import ByteSource, ViewableSource
from binreader.source.config import FragmentedSourceConfig
from binreader.source.memory import MemorySource
from binreader.source.mock import FragmentedSource
from binreader.source.stream import StreamSource

__all__ = [
    "ByteSource",
    "ViewableSource",
    "MemorySource",
    "StreamSource",
    "FragmentedSource",
    "FragmentedSourceConfig",
]
