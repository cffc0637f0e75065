"""Subscription bookkeeping, topic matching and structured logging."""

from .registry import SubscriptionRegistry
from .subscription import Callback, Sub, Subscription
from .topics import split_topic, topic_matches

__all__ = [
    "Callback",
    "Sub",
    "Subscription",
    "SubscriptionRegistry",
    "split_topic",
    "topic_matches",
]
