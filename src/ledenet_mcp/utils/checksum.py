"""Additive 8-bit checksum used by every LEDENET frame."""

from __future__ import annotations

from collections.abc import Iterable


def checksum(data: bytes | Iterable[int]) -> int:
    """Sum all bytes and keep the low 8 bits.

    Python integers do not overflow, so the sum is exact before truncation.
    The checksum of an empty sequence is 0.
    """
    return sum(data) & 0xFF
