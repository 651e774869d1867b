"""Configuration for the fragmenting test source.

This module provides the configuration dataclass for FragmentedSource, which
simulates network or pipe streams that hand out data in small partial reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class FragmentedSourceConfig:
    """Configuration for FragmentedSource.

    Attributes:
        max_fragment_size: Largest number of bytes returned by a single read
            (default 1, the harshest setting).

        pattern: Optional cycle of fragment sizes. When set, successive reads
            return at most pattern[0], pattern[1], ... bytes, wrapping around.
            Overrides max_fragment_size. Useful for placing a fragment boundary
            at an exact offset, e.g. in the middle of a multi-byte character.

        seekable: Whether the source supports tell()/seek() (default True).
            Set to False to exercise the non-seekable code paths.

    Examples:
        ```python
        from binreader.source import FragmentedSource, FragmentedSourceConfig

        # One byte per read
        source = FragmentedSource(data, FragmentedSourceConfig())

        # Split "€" (e2 82 ac) after its first byte
        config = FragmentedSourceConfig(pattern=(1, 2), seekable=False)
        source = FragmentedSource("€".encode(), config)
        ```
    """

    max_fragment_size: int = 1
    pattern: Optional[tuple[int, ...]] = None
    seekable: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_fragment_size <= 0:
            raise ValueError(f"max_fragment_size must be > 0, got {self.max_fragment_size}")

        if self.pattern is not None:
            if len(self.pattern) == 0:
                raise ValueError("pattern must not be empty")
            if any(size <= 0 for size in self.pattern):
                raise ValueError(f"pattern sizes must all be > 0, got {self.pattern}")
