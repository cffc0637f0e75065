from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Id = str


class HookerModel(BaseModel):
    """Base for every Hooker API payload.

    Fields are snake_case in Python and camelCase on the wire. Unknown
    fields sent by newer servers are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MqttDeletedDto(HookerModel):
    """Notification payload announcing that a hook or event was deleted."""

    id: Id


__all__ = ["HookerModel", "Id", "MqttDeletedDto"]
