"""MQTT topic filter matching."""

from __future__ import annotations

from typing import Sequence, Union

SINGLE_LEVEL_WILDCARD = "+"
MULTI_LEVEL_WILDCARD = "#"
SEPARATOR = "/"

TopicLike = Union[str, Sequence[str]]


def split_topic(topic: TopicLike) -> list[str]:
    """Split a slash-delimited topic into segments.

    The empty string has no segments, so an empty pattern only matches an
    empty topic.
    """
    if isinstance(topic, str):
        return topic.split(SEPARATOR) if topic else []
    return list(topic)


def topic_matches(pattern: TopicLike, topic: TopicLike) -> bool:
    """Check if a concrete topic matches a subscription pattern.

    Supports:
    - + for single level wildcard (e.g., "hooker/hooks/+/events" matches "hooker/hooks/abc/events")
    - # as the last segment for zero or more trailing levels
      (e.g., "a/b/#" matches "a/b", "a/b/c" and "a/b/c/d")

    A "#" anywhere else is compared literally.

    Args:
        pattern: Subscription pattern (string or segment sequence)
        topic: Topic of a received message (string or segment sequence)

    Returns:
        True if topic matches pattern, False otherwise
    """
    pattern_parts = split_topic(pattern)
    topic_parts = split_topic(topic)
    last = len(pattern_parts) - 1

    for i, part in enumerate(pattern_parts):
        if part == MULTI_LEVEL_WILDCARD and i == last:
            return True

        if i >= len(topic_parts):
            return False

        if part == SINGLE_LEVEL_WILDCARD:
            continue

        if part != topic_parts[i]:
            return False

    return len(pattern_parts) == len(topic_parts)


def pattern_specificity(pattern: TopicLike) -> tuple[int, int, int]:
    """Rank a pattern by how narrowly it selects topics (higher is narrower).

    Literal levels count first, then the absence of a trailing ``#``, then
    fewer ``+`` levels. A ``#`` that is not the last segment is a literal.
    """
    parts = split_topic(pattern)
    multi = 1 if parts and parts[-1] == MULTI_LEVEL_WILDCARD else 0
    single = parts.count(SINGLE_LEVEL_WILDCARD)
    return len(parts) - multi - single, -multi, -single


__all__ = [
    "MULTI_LEVEL_WILDCARD",
    "SEPARATOR",
    "SINGLE_LEVEL_WILDCARD",
    "TopicLike",
    "pattern_specificity",
    "split_topic",
    "topic_matches",
]
