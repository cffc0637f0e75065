"""Client configuration."""

from .broker import ConnectionParams, parse_broker_url
from .models import DEFAULT_BASE_URL, ApiClientConfig, MQTTClientConfig

__all__ = [
    "ApiClientConfig",
    "ConnectionParams",
    "DEFAULT_BASE_URL",
    "MQTTClientConfig",
    "parse_broker_url",
]
