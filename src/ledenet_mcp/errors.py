"""Exceptions raised by the codec and the device session."""

from __future__ import annotations


class LedenetError(Exception):
    """Base class for all ledenet_mcp errors."""


class DecodeError(LedenetError, ValueError):
    """A device reply could not be decoded."""


class WrongLengthError(DecodeError):
    """The reply does not have the fixed status length."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Status reply must be {expected} bytes, got {actual}")


class ChecksumMismatchError(DecodeError):
    """The embedded checksum does not match the recomputed one."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch: expected 0x{expected:02X}, got 0x{actual:02X}"
        )


class ActionError(LedenetError):
    """A session operation failed."""


class NotConnectedError(ActionError):
    """An operation was attempted before a successful connect."""

    def __init__(self, message: str = "Not connected to device") -> None:
        super().__init__(message)


class TransportError(ActionError):
    """The underlying byte stream failed during an operation."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"Transport error: {cause}")
