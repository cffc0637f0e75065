"""Events table layout and attachment contracts."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from .common import HookerModel, Id


class ColumnType(str, Enum):
    BOOKMARK = "bookmark"
    EVENT_ID = "eventId"
    TIMESTAMP = "timestamp"
    METHOD = "method"
    FORWARD_STATUS = "forwardStatus"
    HOOK_ID = "hookId"
    PATH = "path"
    IP = "ip"
    CONTENT_TYPE = "contentType"
    BODY = "body"
    ACTIONS = "actions"
    CUSTOM = "custom"


class ColumnDto(HookerModel):
    """Per-hook column configuration row."""

    id: Id
    type: ColumnType
    name: str
    width_pct: float = Field(default=0, ge=0, le=100)  # 0 => auto
    show: bool = True
    json_path: Optional[str] = None  # custom columns only


class SaveColumnsBody(HookerModel):
    columns: list[ColumnDto]


class AttachmentType(str, Enum):
    FORM_DATA = "form-data"
    EML = "eml"
    EML_ATTACHMENT = "eml-attachment"


class AttachmentMetaDto(HookerModel):
    id: Id
    name: str
    length: int
    type: AttachmentType
    mime_type: str
    source_id: Optional[str] = None  # e.g. Content-ID of an email attachment


__all__ = [
    "AttachmentMetaDto",
    "AttachmentType",
    "ColumnDto",
    "ColumnType",
    "SaveColumnsBody",
]
