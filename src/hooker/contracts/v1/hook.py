"""Hook contracts: the inspectable endpoints events are captured on."""

from __future__ import annotations

import secrets
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import HookerModel, Id

VERIFY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
VERIFY_LENGTH = 25
HOOK_URL_NAME_PATTERN = r"^[a-z0-9_-]{1,50}$"


class HookVisibility(str, Enum):
    """Who may read a hook's events."""

    PUBLIC = "Public"
    PRIVATE = "Private"


class HookDto(HookerModel):
    """Parent record grouping captured events."""

    id: Id
    timestamp: float
    created_by: Optional[Id] = None  # None for anonymous ownership
    owner_verify: Optional[str] = None
    visibility: HookVisibility
    name: Optional[str] = None
    node: str
    url: str


class HookCreateBody(HookerModel):
    id: Id
    owner_verify: Optional[str] = None
    visibility: Optional[HookVisibility] = None


class HookVisibilityUpdateBody(HookerModel):
    visibility: HookVisibility
    owner_verify: Optional[str] = None


class HookClaimBody(HookerModel):
    owner_verify: str


class HookNameUpdateBody(HookerModel):
    # None clears the name. It is always sent on the wire.
    name: Optional[str] = Field(default=None, max_length=120)

    def to_wire(self) -> dict[str, object]:
        return {"name": self.name}


class HookUrlDto(HookerModel):
    """One of possibly several public URLs of a hook; exactly one is primary."""

    id: Id
    hook_id: Id
    name: str
    node: str
    is_primary: bool
    url: str


class HookUrlCreateBody(HookerModel):
    name: str = Field(pattern=HOOK_URL_NAME_PATTERN, max_length=50)


def new_verify() -> str:
    """Generate a 25-char base62 owner verification token."""
    return "".join(secrets.choice(VERIFY_ALPHABET) for _ in range(VERIFY_LENGTH))


__all__ = [
    "HookClaimBody",
    "HookCreateBody",
    "HookDto",
    "HookNameUpdateBody",
    "HookUrlCreateBody",
    "HookUrlDto",
    "HookVisibility",
    "HookVisibilityUpdateBody",
    "new_verify",
]
