"""Captured inbound HTTP request contracts."""

from __future__ import annotations

from typing import Any, Optional

from .common import HookerModel, Id
from .forward import ForwardStatus


class EventDto(HookerModel):
    """Single captured inbound HTTP request tied to a hook."""

    id: Id
    hook_id: Id
    path: str
    querystring: str  # no leading "?"
    method: str
    body: Optional[str] = None
    headers: Any = None
    timestamp: float  # ms epoch
    ip: str
    content_type: Optional[str] = None
    bookmarked: bool = False


class EventListItemDto(EventDto):
    """Event enriched with the aggregated status of its forwards.

    ``forward_status`` is None when the event has no forwards. With several
    forwards the most relevant status wins:
    failed > running > pendingReattempt > pending > completed.
    """

    forward_status: Optional[ForwardStatus] = None


class EventsListCursor(HookerModel):
    before_ts: float
    before_id: str


class EventsListDto(HookerModel):
    items: list[EventListItemDto]
    next_cursor: Optional[EventsListCursor] = None


class EventBookmarkBody(HookerModel):
    state: bool


__all__ = [
    "EventBookmarkBody",
    "EventDto",
    "EventListItemDto",
    "EventsListCursor",
    "EventsListDto",
]
