"""Client configuration and broker credential contracts."""

from __future__ import annotations

from typing import Optional

from .common import HookerModel


class MqttBrokerConfig(HookerModel):
    broker_url: str
    client_id_prefix: str


class AppConfigDto(HookerModel):
    """Application configuration exposed to clients.

    ``smtp_base_domain`` is the base domain of incoming email addresses
    (``<hookName>@<node>.<smtpBaseDomain>``); email ingestion is disabled
    when unset.
    """

    mqtt: MqttBrokerConfig
    smtp_base_domain: Optional[str] = None


class MqttJwtConfigDto(HookerModel):
    """Short-lived broker credentials. The JWT travels as the password."""

    username: str
    password: str
    expires_at: float

    def __repr__(self) -> str:
        return (
            f"MqttJwtConfigDto(username={self.username!r}, password='***REDACTED***', "
            f"expires_at={self.expires_at!r})"
        )

    __str__ = __repr__


__all__ = ["AppConfigDto", "MqttBrokerConfig", "MqttJwtConfigDto"]
