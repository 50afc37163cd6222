"""Data models for device state."""

from .state import ColorMode, ColorModeFlag, DeviceState
