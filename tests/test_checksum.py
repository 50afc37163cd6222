"""Tests for the additive 8-bit checksum."""

from ledenet_mcp.utils.checksum import checksum


def test_checksum_empty():
    """Checksum of no bytes is zero."""
    assert checksum(b"") == 0
    assert checksum([]) == 0


def test_checksum_wraps():
    """Sums above 0xFF keep only the low byte."""
    assert checksum([0xFF, 0xFF]) == 0xFE


def test_checksum_query_prefix():
    """Known value for the state query prefix."""
    assert checksum([0x81, 0x8A, 0x8B]) == 0x96


def test_checksum_large_input():
    """Long inputs never overflow the result range."""
    data = bytes([0xFF]) * 10_000
    assert checksum(data) == (0xFF * 10_000) & 0xFF


def test_checksum_accepts_bytes_and_lists():
    """bytes, bytearray and int lists give the same result."""
    values = [0x31, 0x10, 0x20, 0x30]
    assert checksum(values) == checksum(bytes(values)) == checksum(bytearray(values))
