"""Validated reader configuration.

This module provides ReaderOptions, a Pydantic model collecting the settings a
BinaryReader is constructed with. Validation happens once, when the options are
created, so a misspelled encoding name fails before any source is opened.
"""

from __future__ import annotations

import codecs

from pydantic import BaseModel, ConfigDict, field_validator

from .codec.text import TextEncoding


class ReaderOptions(BaseModel):
    """Settings for a BinaryReader.

    Attributes:
        encoding: Text encoding for characters and strings (default "utf-8").
            Any name or alias known to codecs.lookup(); stored in canonical form.
        errors: Codec error handler used while decoding text (default "strict").
            With "strict", invalid byte sequences raise FormatError.
        leave_open: If True, closing the reader does not close its source.

    Example:
        >>> options = ReaderOptions(encoding="UTF16", leave_open=True)
        >>> options.encoding
        'utf-16'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    encoding: str = "utf-8"
    errors: str = "strict"
    leave_open: bool = False

    @field_validator("encoding")
    @classmethod
    def _canonical_encoding(cls, value: str) -> str:
        try:
            return codecs.lookup(value).name
        except LookupError as e:
            raise ValueError(f"Unknown text encoding: {value!r}") from e

    @field_validator("errors")
    @classmethod
    def _known_error_handler(cls, value: str) -> str:
        try:
            codecs.lookup_error(value)
        except LookupError as e:
            raise ValueError(f"Unknown codec error handler: {value!r}") from e
        return value

    def text_encoding(self) -> TextEncoding:
        """Return the TextEncoding these options describe."""
        return TextEncoding(name=self.encoding, errors=self.errors)
