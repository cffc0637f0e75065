"""Exception hierarchy for the Hooker client."""

from __future__ import annotations

from typing import Any


class HookerError(Exception):
    """Base class for all client errors."""


class ApiError(HookerError):
    """REST request returned a non-success status."""

    def __init__(self, status: int, message: str, body: Any = None) -> None:
        self.status = status
        self.body = body
        super().__init__(message)


class ConnectionFailedError(HookerError):
    """Broker rejected the connection or could not be reached."""


class SubscribeError(HookerError):
    """Broker subscribe round-trip failed."""

    def __init__(self, pattern: str, message: str | None = None) -> None:
        self.pattern = pattern
        super().__init__(message or f"Failed to subscribe to {pattern!r}")


class UnsubscribeError(HookerError):
    """Broker unsubscribe round-trip failed."""

    def __init__(self, pattern: str, message: str | None = None) -> None:
        self.pattern = pattern
        super().__init__(message or f"Failed to unsubscribe from {pattern!r}")


class PayloadDecodeError(HookerError):
    """Message payload is not a UTF-8 JSON document."""

    def __init__(self, topic: str, payload: bytes, reason: str) -> None:
        self.topic = topic
        self.payload = payload
        super().__init__(f"Failed to parse MQTT message payload on {topic!r} as JSON: {reason}")


class ClientClosedError(HookerError):
    """Client was closed and can no longer be used."""


__all__ = [
    "ApiError",
    "ClientClosedError",
    "ConnectionFailedError",
    "HookerError",
    "PayloadDecodeError",
    "SubscribeError",
    "UnsubscribeError",
]
