"""Adapter implementations bridging the client to HTTP and MQTT infrastructure."""

from .api_client import ApiClient, AuthProvider, token_auth
from .mqtt_asyncio import AsyncioMQTTTransport
from .mqtt_client import ConnectionState, ErrorReporter, HookerMQTTClient

__all__ = [
    "ApiClient",
    "AsyncioMQTTTransport",
    "AuthProvider",
    "ConnectionState",
    "ErrorReporter",
    "HookerMQTTClient",
    "token_auth",
]
