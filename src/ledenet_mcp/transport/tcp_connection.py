"""Blocking TCP connection to a LEDENET controller.

Controllers listen on TCP port 5577 and speak the fixed-size frames built
by :mod:`ledenet_mcp.protocol`. Every write sends the whole frame and every
read waits for the exact number of bytes requested; a partial transfer is
reported as an error, never returned as data.
"""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5577
RECV_CHUNK_SIZE = 1024


def parse_address(
    address: str | tuple[str, int],
    default_port: int = DEFAULT_PORT,
) -> tuple[str, int]:
    """Split an address into host and port.

    Accepts ``"host"``, ``"host:port"``, ``"[ipv6]:port"``, a bare IPv6
    literal, or a ``(host, port)`` tuple.

    Raises:
        ValueError: If the host is empty or the port is not 1-65535.
    """
    if isinstance(address, tuple):
        host, port = address
    else:
        address = address.strip()
        host, port = address, default_port
        if address.startswith("["):
            end = address.find("]")
            if end == -1:
                raise ValueError(f"Unterminated IPv6 literal in {address!r}")
            host = address[1:end]
            rest = address[end + 1 :]
            if rest:
                if not rest.startswith(":"):
                    raise ValueError(f"Invalid address {address!r}")
                port = rest[1:]
        elif address.count(":") == 1:
            host, port = address.split(":")

    try:
        port = int(port)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port {port!r}") from None
    if not host:
        raise ValueError(f"Missing host in {address!r}")
    if not 0 < port < 65536:
        raise ValueError(f"Port must be 1-65535, got {port}")
    return host, port


class TCPConnection:
    """Manages the TCP stream to one controller.

    Usage::

        conn = TCPConnection("192.168.1.105")
        conn.open()
        conn.write(frame_bytes)
        reply = conn.read_exact(14)
        conn.close()
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: socket.socket | None = None

    def __repr__(self) -> str:
        state = "open" if self.connected else "closed"
        return f"TCPConnection({self._host}:{self._port}, {state})"

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> tuple[str, int]:
        return (self._host, self._port)

    def open(self) -> None:
        """Dial the controller.

        Raises:
            OSError: If the connection cannot be established.
        """
        if self._sock is not None:
            return
        self._sock = socket.create_connection(
            (self._host, self._port), timeout=self._timeout
        )
        logger.info("Connected to %s:%d", self._host, self._port)

    def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self._sock is None:
            return

        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("Not connected to device")
        return self._sock

    def write(self, data: bytes) -> int:
        """Write a complete frame.

        Returns:
            Number of bytes written (always ``len(data)``).

        Raises:
            ConnectionError: If not connected.
            OSError: If the send fails.
        """
        sock = self._require_socket()
        logger.debug("TX %s: %s", self._host, data.hex(" "))
        sock.sendall(data)
        return len(data)

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Raises:
            ConnectionError: If not connected, or if the peer closes the
                stream before ``size`` bytes arrive.
            OSError: On any other socket failure, including timeouts.
        """
        sock = self._require_socket()
        buf = bytearray()
        while len(buf) < size:
            chunk = sock.recv(min(size - len(buf), RECV_CHUNK_SIZE))
            if not chunk:
                raise ConnectionError(
                    f"Connection closed after {len(buf)} of {size} bytes"
                )
            buf += chunk
        logger.debug("RX %s: %s", self._host, buf.hex(" "))
        return bytes(buf)

    def send_and_receive(self, data: bytes, size: int) -> bytes:
        """Write a frame and read a fixed-size reply."""
        self.write(data)
        return self.read_exact(size)
