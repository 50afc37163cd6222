"""Status reply decoding.

Reply layout (14 bytes)::

    pos  0  1  2  3  4  5  6  7  8  9 10 11 12 13
        81 25 23 61 21 06 38 05 06 f9 01 00 0f 9d
         |  |  |  |  |  |  |  |  |  |  |  |  |  checksum of bytes 0-12
         |  |  |  |  |  |  |  |  |  |  |  |  color mode flag (f0 colors, 0f whites, 00 all)
         |  |  |  |  |  |  |  |  |  |  |  cool white
         |  |  |  |  |  |  |  |  |  |  version number
         |  |  |  |  |  |  |  |  |  warm white
         |  |  |  |  |  |  |  |  blue
         |  |  |  |  |  |  |  green
         |  |  |  |  |  |  red
         |  |  |  |  |  speed: 0x01 fastest, 0x1f slowest
         |  |  |  |  mode: WW(01) WW+CW(02) RGB(03) RGBW(04) RGBWW(05)
         |  |  |  preset pattern
         |  |  on(23)/off(24)
         |  device type
         message head
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import ChecksumMismatchError, WrongLengthError
from ..models.state import ColorMode, ColorModeFlag, DeviceState
from ..utils.checksum import checksum
from .commands import PowerByte
from .framing import STATUS_REPLY_SIZE, verify_frame

logger = logging.getLogger(__name__)

STATUS_HEAD = 0x81


@dataclass(frozen=True)
class StatusReply:
    """Parsed 14-byte status reply."""

    head: int
    device_type: int
    power: int
    preset_pattern: int
    mode: int
    speed: int
    red: int
    green: int
    blue: int
    warm_white: int
    version: int
    cool_white: int
    color_mode_flag: int
    checksum: int
    raw: bytes

    def __repr__(self) -> str:
        return (
            f"StatusReply(power=0x{self.power:02X}, "
            f"rgb=({self.red}, {self.green}, {self.blue}), "
            f"raw={self.raw.hex(' ')})"
        )

    @property
    def is_on(self) -> bool:
        return self.power != PowerByte.OFF

    @property
    def checksum_valid(self) -> bool:
        return checksum(self.raw[:-1]) == self.checksum

    @property
    def color_mode(self) -> ColorMode | None:
        """The reported channel layout, or None for an unknown mode byte."""
        try:
            return ColorMode(self.mode)
        except ValueError:
            return None

    @property
    def color_mode_flag_name(self) -> ColorModeFlag | None:
        try:
            return ColorModeFlag(self.color_mode_flag)
        except ValueError:
            return None

    def to_dict(self) -> dict:
        color_mode = self.color_mode
        flag = self.color_mode_flag_name
        return {
            "is_on": self.is_on,
            "device_type": self.device_type,
            "preset_pattern": self.preset_pattern,
            "mode": color_mode.name if color_mode else self.mode,
            "speed": self.speed,
            "red": self.red,
            "green": self.green,
            "blue": self.blue,
            "warm_white": self.warm_white,
            "cool_white": self.cool_white,
            "version": self.version,
            "color_mode_flag": flag.name if flag else self.color_mode_flag,
            "checksum_valid": self.checksum_valid,
            "raw_hex": self.raw.hex(" "),
        }


def is_status_frame(data: bytes) -> bool:
    """Return True if ``data`` is a complete reply: 0x81 head and a valid checksum."""
    return (
        len(data) == STATUS_REPLY_SIZE
        and data[0] == STATUS_HEAD
        and verify_frame(data)
    )


def decode_status(data: bytes, verify_checksum: bool = False) -> StatusReply:
    """Decode a status reply.

    Args:
        data: Exactly 14 bytes read from the device.
        verify_checksum: Reject replies whose trailing byte is not the
            checksum of bytes 0-12. Off by default; a mismatch is only
            logged in that case.

    Raises:
        WrongLengthError: If ``data`` is not 14 bytes long.
        ChecksumMismatchError: If ``verify_checksum`` is set and the
            checksum does not match.
    """
    data = bytes(data)
    if len(data) != STATUS_REPLY_SIZE:
        raise WrongLengthError(STATUS_REPLY_SIZE, len(data))

    expected = checksum(data[:-1])
    if expected != data[-1]:
        if verify_checksum:
            raise ChecksumMismatchError(expected, data[-1])
        logger.warning(
            "Status checksum mismatch: expected 0x%02X, got 0x%02X",
            expected,
            data[-1],
        )

    return StatusReply(
        head=data[0],
        device_type=data[1],
        power=data[2],
        preset_pattern=data[3],
        mode=data[4],
        speed=data[5],
        red=data[6],
        green=data[7],
        blue=data[8],
        warm_white=data[9],
        version=data[10],
        cool_white=data[11],
        color_mode_flag=data[12],
        checksum=data[13],
        raw=data,
    )


def to_device_state(reply: StatusReply) -> DeviceState:
    """Project a status reply onto the caller-facing state."""
    return DeviceState(
        is_enabled=reply.power != PowerByte.OFF,
        red=reply.red,
        green=reply.green,
        blue=reply.blue,
    )
