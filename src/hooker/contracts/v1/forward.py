"""Forward contracts: delivery of captured events to external endpoints."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from .common import HookerModel, Id

# ==============================================================================
# FORWARDS
# ==============================================================================


class ForwardStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"  # after all retry attempts
    PENDING_REATTEMPT = "pendingReattempt"


class ForwardDto(HookerModel):
    """Delivery of one event to a rule's target URL.

    A forward may have several delivery attempts.
    """

    id: Id
    hook_id: Id
    forward_rule_id: Id
    event_id: Id
    target_url: str
    timestamp: float
    status_updated_at: Optional[float] = None
    status: ForwardStatus


class ForwardAttemptDto(HookerModel):
    """Single delivery attempt with the target's full response."""

    id: Id
    forward_id: Id
    timestamp: float
    status_code: int
    content_type: Optional[str] = None
    response_body: Optional[str] = None
    duration_ms: float


# ==============================================================================
# FORWARD RULES
# ==============================================================================


class HeaderSelector(HookerModel):
    type: Literal["header"] = "header"
    name: str


class QuerySelector(HookerModel):
    type: Literal["query"] = "query"
    name: str


class BodyJsonSelector(HookerModel):
    type: Literal["body-json"] = "body-json"
    path: str  # JSONPath; yields nothing when the body is not JSON


class BodyTextSelector(HookerModel):
    type: Literal["body-text"] = "body-text"


ValueSelector = Annotated[
    Union[HeaderSelector, QuerySelector, BodyJsonSelector, BodyTextSelector],
    Field(discriminator="type"),
]


class MatchType(str, Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    REGEX = "regex"


class Filter(HookerModel):
    selector: ValueSelector
    match_type: MatchType
    match_value: str
    invert: bool = False


class ForwardRuleDto(HookerModel):
    """Rule for conditionally forwarding a hook's events elsewhere.

    Every pass filter must match and no fail filter may match.
    """

    id: Id
    hook_id: Id
    target_url: str
    is_active: bool
    timestamp: float
    pass_filters: Optional[list[Filter]] = None
    fail_filters: Optional[list[Filter]] = None


__all__ = [
    "BodyJsonSelector",
    "BodyTextSelector",
    "Filter",
    "ForwardAttemptDto",
    "ForwardDto",
    "ForwardRuleDto",
    "ForwardStatus",
    "HeaderSelector",
    "MatchType",
    "QuerySelector",
    "ValueSelector",
]
