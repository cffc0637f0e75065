"""Broker URL parsing."""

from __future__ import annotations

from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel

_DEFAULT_PORTS = {"mqtt": 1883, "mqtts": 8883, "ws": 80, "wss": 443}


class ConnectionParams(BaseModel):
    """Parsed MQTT connection parameters from a broker URL.

    Attributes:
        hostname: MQTT broker hostname or IP address
        port: MQTT broker port (scheme default when omitted)
        transport: "tcp" for mqtt/mqtts, "websockets" for ws/wss
        websocket_path: Request path for websocket transports
        tls: Whether the connection is encrypted (mqtts, wss)
        username: Authentication username embedded in the URL (optional)
        password: Authentication password embedded in the URL (optional, redacted in logs)
    """

    hostname: str
    port: int = 1883
    transport: Literal["tcp", "websockets"] = "tcp"
    websocket_path: Optional[str] = None
    tls: bool = False
    username: Optional[str] = None
    password: Optional[str] = None

    def __repr__(self) -> str:
        """String representation with password redacted."""
        password_str = "***REDACTED***" if self.password else None
        return (
            f"ConnectionParams(hostname={self.hostname!r}, port={self.port}, "
            f"transport={self.transport!r}, tls={self.tls}, "
            f"username={self.username!r}, password={password_str!r})"
        )

    def __str__(self) -> str:
        """String representation with password redacted."""
        return self.__repr__()


def parse_broker_url(url: str) -> ConnectionParams:
    """Parse a broker URL into connection parameters.

    Args:
        url: Broker URL in format (mqtt|mqtts|ws|wss)://[user:pass@]host[:port][/path]

    Returns:
        ConnectionParams with parsed components

    Raises:
        ValueError: If URL has an unsupported scheme

    Examples:
        >>> parse_broker_url("wss://broker.hooker.monster/mqtt")
        ConnectionParams(hostname='broker.hooker.monster', port=443, transport='websockets', tls=True, ...)

        >>> parse_broker_url("mqtt://localhost")
        ConnectionParams(hostname='localhost', port=1883, transport='tcp', tls=False, ...)
    """
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()

    if scheme not in _DEFAULT_PORTS:
        raise ValueError(
            f"Invalid broker URL scheme: {parsed.scheme!r}. "
            "Expected one of 'mqtt://', 'mqtts://', 'ws://', 'wss://'."
        )

    websockets = scheme in ("ws", "wss")
    return ConnectionParams(
        hostname=parsed.hostname or "localhost",
        port=parsed.port or _DEFAULT_PORTS[scheme],
        transport="websockets" if websockets else "tcp",
        websocket_path=(parsed.path or "/") if websockets else None,
        tls=scheme in ("mqtts", "wss"),
        username=parsed.username,
        password=parsed.password,
    )


__all__ = ["ConnectionParams", "parse_broker_url"]
