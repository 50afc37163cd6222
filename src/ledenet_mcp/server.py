"""MCP server entry point for LEDENET Wi-Fi LED controllers.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import LedenetError, NotConnectedError
from .session import DeviceSession

logger = logging.getLogger(__name__)

SOCKET_TIMEOUT = 3.0  # seconds

mcp = FastMCP(
    "ledenet",
    instructions="MCP server for LEDENET / Magic Home Wi-Fi RGB controllers",
)

# Global session state
_session: DeviceSession | None = None
_address: str | None = None


def _get_session() -> DeviceSession:
    """Get the connected session, raising if not connected."""
    if _session is None or not _session.is_connected():
        raise NotConnectedError(
            "Not connected to device. Use the 'connect' tool first."
        )
    return _session


def _parse_hex_color(hex_color: str) -> tuple[int, int, int]:
    """Parse ``#rrggbb`` or ``rrggbb`` into channel values."""
    value = hex_color.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError("Hex color must be 6 characters (RRGGBB)")
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        raise ValueError(f"Invalid hex color {hex_color!r}") from None


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(address: str) -> dict[str, Any]:
    """Open a TCP connection to a controller.

    Sends a state query to confirm the device speaks the LEDENET
    protocol, then reports the current power state and color. Connecting
    to a different address replaces the current connection; if the new
    one fails, the old one is kept. The state report is best-effort: a
    failed follow-up query is returned as ``state_error`` while the
    connection stays open.

    Args:
        address: Controller IP or hostname, optionally with ``:port``
            (default port 5577).
    """
    global _session, _address
    if _session is not None and _session.is_connected():
        if address == _address:
            return {
                "connected": True,
                "message": "Already connected",
                "address": _address,
            }
        session = _session
    else:
        session = DeviceSession(timeout=SOCKET_TIMEOUT)

    try:
        session.connect(address)
    except ValueError as e:
        return {"error": str(e)}

    _session, _address = session, address
    logger.info("Connected to %s", address)
    result: dict[str, Any] = {"connected": True, "address": address}
    try:
        result.update(session.state().to_dict())
    except LedenetError as e:
        logger.warning("State query after connecting to %s failed: %s", address, e)
        result["state_error"] = str(e)
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the controller."""
    global _session, _address
    if _session is not None:
        _session.close()
    _session, _address = None, None
    return {"disconnected": True}


# ─── STATE TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def get_state() -> dict[str, Any]:
    """Query the current power state and RGB color."""
    return _get_session().state().to_dict()


@mcp.tool()
def get_status() -> dict[str, Any]:
    """Query the full status reply: mode, speed, white levels, firmware version."""
    return _get_session().status().to_dict()


# ─── COMMAND TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def set_color(red: int, green: int, blue: int) -> dict[str, Any]:
    """Set the RGB color. White channels are left unchanged.

    Args:
        red: Red level (0-255).
        green: Green level (0-255).
        blue: Blue level (0-255).
    """
    session = _get_session()
    try:
        session.set_color(red, green, blue)
    except ValueError as e:
        return {"error": str(e)}
    return {"red": red, "green": green, "blue": blue}


@mcp.tool()
def set_hex_color(hex_color: str) -> dict[str, Any]:
    """Set the RGB color from a hex string such as ``#ff8000``."""
    try:
        red, green, blue = _parse_hex_color(hex_color)
    except ValueError as e:
        return {"error": str(e)}
    return set_color(red, green, blue)


@mcp.tool()
def set_power(on: bool) -> dict[str, bool]:
    """Turn the controller on or off.

    Args:
        on: True to switch on, False to switch off.
    """
    _get_session().set_power(on)
    return {"is_enabled": on}


@mcp.tool()
def toggle_power() -> dict[str, bool]:
    """Flip the power state based on a fresh state query."""
    return {"is_enabled": _get_session().toggle_power()}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("ledenet://device/state")
def resource_device_state() -> str:
    """Connection state, power, and color."""
    if _session is None or not _session.is_connected():
        return json.dumps({"connected": False})

    state = _session.state()
    return json.dumps({"connected": True, "address": _address, **state.to_dict()})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
