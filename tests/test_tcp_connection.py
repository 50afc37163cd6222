"""Tests for the TCP transport."""

from __future__ import annotations

import socket
from unittest.mock import MagicMock, patch

import pytest

from ledenet_mcp.transport.tcp_connection import (
    DEFAULT_PORT,
    TCPConnection,
    parse_address,
)


@pytest.fixture
def socket_pair():
    """Connected client/peer sockets; the client is handed to TCPConnection."""
    client, peer = socket.socketpair()
    yield client, peer
    client.close()
    peer.close()


def _open_with(sock: socket.socket, **kwargs) -> TCPConnection:
    conn = TCPConnection("10.0.0.5", **kwargs)
    with patch(
        "ledenet_mcp.transport.tcp_connection.socket.create_connection",
        return_value=sock,
    ) as create:
        conn.open()
    create.assert_called_once_with(("10.0.0.5", DEFAULT_PORT), timeout=kwargs.get("timeout"))
    return conn


# ─── parse_address ────────────────────────────────────────────────────

def test_parse_address_host_only():
    assert parse_address("192.168.1.105") == ("192.168.1.105", 5577)


def test_parse_address_host_port():
    assert parse_address("bulb.local:6000") == ("bulb.local", 6000)


def test_parse_address_tuple():
    assert parse_address(("10.0.0.1", 1234)) == ("10.0.0.1", 1234)


def test_parse_address_ipv6():
    assert parse_address("[fe80::1]:5000") == ("fe80::1", 5000)
    assert parse_address("[fe80::1]") == ("fe80::1", 5577)
    assert parse_address("fe80::1") == ("fe80::1", 5577)


@pytest.mark.parametrize(
    "address", ["", "host:", "host:abc", "host:0", "host:70000", ":5577", "[fe80::1", "[::1]x"]
)
def test_parse_address_invalid(address):
    with pytest.raises(ValueError):
        parse_address(address)


# ─── TCPConnection ────────────────────────────────────────────────────

def test_not_connected_initially():
    conn = TCPConnection("10.0.0.5")
    assert not conn.connected
    assert conn.address == ("10.0.0.5", DEFAULT_PORT)
    assert "closed" in repr(conn)


def test_write_requires_open():
    conn = TCPConnection("10.0.0.5")
    with pytest.raises(ConnectionError):
        conn.write(b"\x81")
    with pytest.raises(ConnectionError):
        conn.read_exact(14)


def test_open_failure_propagates():
    conn = TCPConnection("10.0.0.5")
    with patch(
        "ledenet_mcp.transport.tcp_connection.socket.create_connection",
        side_effect=ConnectionRefusedError("refused"),
    ):
        with pytest.raises(ConnectionRefusedError):
            conn.open()
    assert not conn.connected


def test_write_sends_full_frame(socket_pair):
    client, peer = socket_pair
    conn = _open_with(client)
    assert conn.write(b"\x71\x23\x0f\xa3") == 4
    assert peer.recv(16) == b"\x71\x23\x0f\xa3"


def test_read_exact_reassembles_chunks(socket_pair):
    """A reply split across several segments is read completely."""
    client, peer = socket_pair
    conn = _open_with(client)
    reply = bytes(range(14))
    peer.sendall(reply[:5])
    peer.sendall(reply[5:9])
    peer.sendall(reply[9:])
    assert conn.read_exact(14) == reply


def test_read_exact_short_read_raises(socket_pair):
    """EOF before the full reply is an error, not a short result."""
    client, peer = socket_pair
    conn = _open_with(client)
    peer.sendall(bytes(10))
    peer.shutdown(socket.SHUT_WR)
    with pytest.raises(ConnectionError, match="10 of 14"):
        conn.read_exact(14)


def test_read_exact_leaves_extra_bytes(socket_pair):
    client, peer = socket_pair
    conn = _open_with(client)
    peer.sendall(bytes(range(20)))
    assert conn.read_exact(14) == bytes(range(14))
    assert conn.read_exact(6) == bytes(range(14, 20))


def test_send_and_receive(socket_pair):
    client, peer = socket_pair
    conn = _open_with(client, timeout=2.0)
    peer.sendall(b"\x01\x02\x03\x04")
    assert conn.send_and_receive(b"\x81\x8a\x8b\x96", 4) == b"\x01\x02\x03\x04"
    assert peer.recv(16) == b"\x81\x8a\x8b\x96"


def test_close_is_idempotent(socket_pair):
    client, _ = socket_pair
    conn = _open_with(client)
    assert conn.connected
    conn.close()
    assert not conn.connected
    conn.close()
    with pytest.raises(ConnectionError):
        conn.write(b"\x00")


def test_close_error_is_logged():
    sock = MagicMock()
    sock.close.side_effect = OSError("boom")
    conn = _open_with(sock)
    with patch("ledenet_mcp.transport.tcp_connection.logger") as log:
        conn.close()
    log.warning.assert_called_once()
    assert not conn.connected


def test_open_twice_keeps_socket(socket_pair):
    client, _ = socket_pair
    conn = _open_with(client)
    with patch(
        "ledenet_mcp.transport.tcp_connection.socket.create_connection"
    ) as create:
        conn.open()
    create.assert_not_called()
