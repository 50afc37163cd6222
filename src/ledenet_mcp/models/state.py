"""Caller-facing device state and mode enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ColorMode(IntEnum):
    """Channel layout reported at offset 4 of the status reply."""

    WW = 0x01
    WW_CW = 0x02
    RGB = 0x03
    RGBW = 0x04
    RGBWW = 0x05


class ColorModeFlag(IntEnum):
    """Which channels the last level change wrote (offset 12)."""

    ALL = 0x00
    WHITES = 0x0F
    COLORS = 0xF0


@dataclass(frozen=True)
class DeviceState:
    """Power and RGB levels projected from a status reply."""

    is_enabled: bool
    red: int
    green: int
    blue: int

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def hex_color(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def to_dict(self) -> dict:
        return {
            "is_enabled": self.is_enabled,
            "red": self.red,
            "green": self.green,
            "blue": self.blue,
            "hex_color": self.hex_color,
        }
