"""Device session: sequences codec calls over one TCP stream.

The session is either disconnected (no stream) or connected (one open
stream). Every command requires a stream; calling one without it raises
:class:`NotConnectedError`. Only :meth:`DeviceSession.state` and
:meth:`DeviceSession.status` read a reply; color and power commands are
fire-and-forget writes.

Sessions are not thread-safe. Serialize access externally when sharing
one between threads.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import NotConnectedError, TransportError
from .models.state import DeviceState
from .protocol.commands import encode_query, encode_set_color, encode_set_power
from .protocol.framing import STATUS_REPLY_SIZE
from .protocol.parser import (
    StatusReply,
    decode_status,
    is_status_frame,
    to_device_state,
)
from .transport.tcp_connection import DEFAULT_PORT, TCPConnection, parse_address

logger = logging.getLogger(__name__)

# Upper bound on stale bytes discarded while realigning after a failed read
MAX_RESYNC_BYTES = 2 * STATUS_REPLY_SIZE

ConnectionFactory = Callable[..., TCPConnection]


class DeviceSession:
    """A connection to one LEDENET controller.

    Usage::

        with DeviceSession() as session:
            session.connect("192.168.1.105")
            session.set_power(True)
            session.set_color(255, 0, 0)
            print(session.state())
    """

    def __init__(
        self,
        timeout: float | None = None,
        connection_factory: ConnectionFactory = TCPConnection,
        verify_checksum: bool = False,
    ) -> None:
        self._timeout = timeout
        self._connection_factory = connection_factory
        self._verify_checksum = verify_checksum
        self._connection: TCPConnection | None = None
        self._out_of_sync = False

    def __enter__(self) -> DeviceSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def is_connected(self) -> bool:
        return self._connection is not None

    def connect(self, address: str | tuple[str, int]) -> None:
        """Open a stream to ``address`` and confirm the peer answers a query.

        The 14-byte reply is read as a liveness check and discarded. On
        success the new stream replaces any previous one.

        Raises:
            ValueError: If ``address`` cannot be parsed.
            OSError: If dialing, writing, or reading the reply fails. The
                session is left as it was before the call.
        """
        host, port = parse_address(address, DEFAULT_PORT)
        conn = self._connection_factory(host, port, timeout=self._timeout)
        try:
            conn.open()
            conn.send_and_receive(encode_query(), STATUS_REPLY_SIZE)
        except OSError:
            conn.close()
            raise

        previous, self._connection = self._connection, conn
        self._out_of_sync = False
        if previous is not None:
            previous.close()
        logger.info("Session connected to %s:%d", host, port)

    def close(self) -> None:
        """Release the stream. Safe to call when already disconnected."""
        conn, self._connection = self._connection, None
        self._out_of_sync = False
        if conn is not None:
            conn.close()

    def _require_connection(self) -> TCPConnection:
        if self._connection is None:
            raise NotConnectedError()
        return self._connection

    def status(self) -> StatusReply:
        """Query the device and return the full decoded reply.

        Raises:
            NotConnectedError: If the session has no stream.
            TransportError: On any stream failure, including a short read.
            DecodeError: If checksum verification is enabled and fails.
        """
        conn = self._require_connection()
        try:
            raw = conn.send_and_receive(encode_query(), STATUS_REPLY_SIZE)
            if self._out_of_sync:
                raw = self._resync(conn, raw)
        except OSError as e:
            self._out_of_sync = True
            raise TransportError(e) from e
        return decode_status(raw, verify_checksum=self._verify_checksum)

    def _resync(self, conn: TCPConnection, raw: bytes) -> bytes:
        """Slide over leftovers of an interrupted reply until a whole reply lines up.

        Only used after a failed exchange, when the tail of a late reply
        may still be queued ahead of the answer to the current query.
        """
        skipped = 0
        while not is_status_frame(raw):
            if skipped >= MAX_RESYNC_BYTES:
                raise ConnectionError(
                    f"No status reply found after skipping {skipped} bytes"
                )
            raw = raw[1:] + conn.read_exact(1)
            skipped += 1
        if skipped:
            logger.warning("Resynchronised reply stream, skipped %d bytes", skipped)
        self._out_of_sync = False
        return raw

    def state(self) -> DeviceState:
        """Query the device for its power state and RGB levels."""
        return to_device_state(self.status())

    def _send(self, frame: bytes) -> None:
        conn = self._require_connection()
        try:
            conn.write(frame)
        except OSError as e:
            raise TransportError(e) from e

    def set_color(self, red: int, green: int, blue: int) -> None:
        """Set the RGB levels. White channels are not touched.

        Raises:
            ValueError: If a channel is outside 0-255.
            NotConnectedError: If the session has no stream.
            TransportError: If the write fails.
        """
        self._require_connection()
        self._send(encode_set_color(red, green, blue))

    def set_power(self, on: bool) -> None:
        """Switch the device to an absolute power state."""
        self._send(encode_set_power(on))

    def toggle_power(self) -> bool:
        """Flip the current power state and return the new target.

        Reads the state first, so this costs one extra round-trip and is
        not atomic with respect to other controllers of the same device.
        """
        target = not self.state().is_enabled
        self.set_power(target)
        return target
