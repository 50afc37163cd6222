"""Checksum-terminated frame builder and validator.

Frame layout::

    +------------------------------+----------+
    |           Payload            | Checksum |
    |  variable length (>= 1 byte) |  1 byte  |
    +------------------------------+----------+

- Payload: command byte followed by command-specific bytes
- Checksum: sum of all payload bytes, truncated to 8 bits

Command frames and the 14-byte status reply both use this layout.
There is no preamble, length field or padding.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..utils.checksum import checksum

CHECKSUM_SIZE = 1
STATUS_REPLY_SIZE = 14


def build_frame(payload: bytes | Iterable[int]) -> bytes:
    """Append the checksum byte to a payload.

    Args:
        payload: Command byte plus parameters, each 0-255.

    Returns:
        The payload followed by ``checksum(payload)``.
    """
    body = bytes(payload)
    return body + bytes([checksum(body)])


def split_frame(frame: bytes) -> tuple[bytes, int]:
    """Split a frame into its payload and trailing checksum byte."""
    if len(frame) < CHECKSUM_SIZE:
        raise ValueError("Frame is empty")
    return frame[:-CHECKSUM_SIZE], frame[-1]


def verify_frame(frame: bytes) -> bool:
    """Return True if the last byte is the checksum of the preceding bytes.

    An empty frame has no checksum byte and is never valid.
    """
    if len(frame) < CHECKSUM_SIZE:
        return False
    payload, embedded = split_frame(frame)
    return checksum(payload) == embedded
