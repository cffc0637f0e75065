"""Python client for the Hooker webhook inspection service.

``ApiClient`` wraps the REST API (hooks, events, columns, forward rules);
``HookerMQTTClient`` delivers live notifications over MQTT.
"""

from hooker.adapters import ApiClient, ConnectionState, HookerMQTTClient
from hooker.config import ApiClientConfig, MQTTClientConfig
from hooker.contracts import TopicRoute, topics
from hooker.errors import (
    ApiError,
    ClientClosedError,
    ConnectionFailedError,
    HookerError,
    PayloadDecodeError,
    SubscribeError,
    UnsubscribeError,
)
from hooker.runtime import Subscription, topic_matches

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ApiClientConfig",
    "ApiError",
    "ClientClosedError",
    "ConnectionFailedError",
    "ConnectionState",
    "HookerError",
    "HookerMQTTClient",
    "MQTTClientConfig",
    "PayloadDecodeError",
    "SubscribeError",
    "Subscription",
    "TopicRoute",
    "UnsubscribeError",
    "topic_matches",
    "topics",
]
