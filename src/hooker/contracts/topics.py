"""MQTT topic routes published by the Hooker service.

Every notification lives under the ``hooker`` root, either per hook
(``hooker/hooks/<hookId>/...``) or scoped to the owning user
(``hooker/users/<userId>/hooks/<hookId>/...``). Each builder returns a
``TopicRoute`` pairing the subscription pattern with the payload model the
service publishes on it. Identifiers default to ``+`` so a route can match
every hook, event or forward.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Type, Union

from pydantic import BaseModel

from hooker.contracts.v1 import EventDto, ForwardAttemptDto, ForwardDto, ForwardStatus, HookDto, MqttDeletedDto
from hooker.runtime.topics import MULTI_LEVEL_WILDCARD, SEPARATOR, SINGLE_LEVEL_WILDCARD

ROOT = "hooker"


@dataclass(frozen=True, slots=True)
class TopicRoute:
    """Subscription pattern plus the model its payloads decode into."""

    pattern: str
    model: Type[BaseModel]


def _segment(value: object) -> str:
    text = value.value if isinstance(value, ForwardStatus) else str(value)
    if not text or SEPARATOR in text:
        raise ValueError(f"Invalid topic segment: {text!r}")
    return text


def _hook_base(hook_id: str, user_id: Optional[str]) -> str:
    if user_id is None:
        return f"{ROOT}/hooks/{_segment(hook_id)}"
    return f"{ROOT}/users/{_segment(user_id)}/hooks/{_segment(hook_id)}"


def hook_events(hook_id: str = SINGLE_LEVEL_WILDCARD, *, user_id: Optional[str] = None) -> TopicRoute:
    """Events captured by a hook."""
    return TopicRoute(f"{_hook_base(hook_id, user_id)}/events", EventDto)


def hook_event_deleted(
    hook_id: str = SINGLE_LEVEL_WILDCARD,
    event_id: str = SINGLE_LEVEL_WILDCARD,
    *,
    user_id: Optional[str] = None,
) -> TopicRoute:
    return TopicRoute(
        f"{_hook_base(hook_id, user_id)}/events/{_segment(event_id)}/deleted",
        MqttDeletedDto,
    )


def hook_created(hook_id: str = SINGLE_LEVEL_WILDCARD, *, user_id: Optional[str] = None) -> TopicRoute:
    return TopicRoute(f"{_hook_base(hook_id, user_id)}/created", HookDto)


def hook_updated(hook_id: str = SINGLE_LEVEL_WILDCARD, *, user_id: Optional[str] = None) -> TopicRoute:
    return TopicRoute(f"{_hook_base(hook_id, user_id)}/updated", HookDto)


def hook_deleted(hook_id: str = SINGLE_LEVEL_WILDCARD, *, user_id: Optional[str] = None) -> TopicRoute:
    return TopicRoute(f"{_hook_base(hook_id, user_id)}/deleted", MqttDeletedDto)


def hook_forwards_queued(hook_id: str = SINGLE_LEVEL_WILDCARD, *, user_id: Optional[str] = None) -> TopicRoute:
    return TopicRoute(f"{_hook_base(hook_id, user_id)}/forwards/queued", ForwardDto)


def hook_forward_status_changes(
    hook_id: str = SINGLE_LEVEL_WILDCARD,
    forward_id: str = SINGLE_LEVEL_WILDCARD,
    status: Union[ForwardStatus, str, None] = None,
    *,
    user_id: Optional[str] = None,
) -> TopicRoute:
    """Status transitions of forwards; every status when ``status`` is None."""
    last = MULTI_LEVEL_WILDCARD if status is None else _segment(status)
    return TopicRoute(
        f"{_hook_base(hook_id, user_id)}/forwards/{_segment(forward_id)}/status-changes/{last}",
        ForwardDto,
    )


def hook_forward_attempts(
    hook_id: str = SINGLE_LEVEL_WILDCARD,
    forward_id: str = SINGLE_LEVEL_WILDCARD,
    *,
    user_id: Optional[str] = None,
) -> TopicRoute:
    return TopicRoute(
        f"{_hook_base(hook_id, user_id)}/forwards/{_segment(forward_id)}/attempts",
        ForwardAttemptDto,
    )


__all__ = [
    "ROOT",
    "TopicRoute",
    "hook_created",
    "hook_deleted",
    "hook_event_deleted",
    "hook_events",
    "hook_forward_attempts",
    "hook_forward_status_changes",
    "hook_forwards_queued",
    "hook_updated",
]
