"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def hello_bytes() -> bytes:
    """Length prefix 5 followed by "Hello" in a single-byte encoding."""
    return bytes([0x05, 0x48, 0x65, 0x6C, 0x6C, 0x6F])


@pytest.fixture
def mixed_text() -> str:
    """Text mixing 1-, 2-, 3- and 4-byte UTF-8 characters."""
    return "Aé€😀z"
