"""Command identifiers and command frame encoders.

Every command starts with a single-byte command ID and ends with the
8-bit additive checksum appended by :func:`build_frame`.
"""

from __future__ import annotations

from enum import IntEnum

from .framing import build_frame


class Command(IntEnum):
    """Command identifiers (first byte of each frame)."""

    SET_COLOR = 0x31
    SET_POWER = 0x71
    QUERY_STATE = 0x81


class PowerByte(IntEnum):
    """Power values used in set-power frames and status replies."""

    ON = 0x23
    OFF = 0x24


# Fixed trailer bytes
QUERY_TRAILER = bytes([0x8A, 0x8B])
WHITE_UNCHANGED = 0x00
WRITE_MASK_COLORS = 0xF0
TERMINATOR = 0x0F


def _check_channel(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer 0-255, got {value!r}")
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be 0-255, got {value}")
    return value


def encode_query() -> bytes:
    """Build the state query frame: ``81 8A 8B 96``."""
    return build_frame(bytes([Command.QUERY_STATE]) + QUERY_TRAILER)


def encode_set_color(red: int, green: int, blue: int) -> bytes:
    """Build an 8-byte RGB color frame.

    White channels are left untouched: the white byte is zero and the
    write mask selects colors only.

    Args:
        red: Red channel 0-255.
        green: Green channel 0-255.
        blue: Blue channel 0-255.
    """
    return build_frame(
        [
            Command.SET_COLOR,
            _check_channel("red", red),
            _check_channel("green", green),
            _check_channel("blue", blue),
            WHITE_UNCHANGED,
            WRITE_MASK_COLORS,
            TERMINATOR,
        ]
    )


def encode_set_power(on: bool) -> bytes:
    """Build a power frame for an absolute target state.

    ``71 23 0F A3`` turns the device on, ``71 24 0F A4`` turns it off.
    """
    power = PowerByte.ON if on else PowerByte.OFF
    return build_frame([Command.SET_POWER, power, TERMINATOR])
