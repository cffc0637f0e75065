"""Wire contracts: REST DTOs and MQTT topic routes."""

from . import topics, v1
from .topics import TopicRoute

__all__ = ["TopicRoute", "topics", "v1"]
