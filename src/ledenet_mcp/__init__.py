"""Client and MCP server for LEDENET (Magic Home) Wi-Fi LED controllers."""

__version__ = "0.1.0"
