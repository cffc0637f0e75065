"""Client configuration models.

Both models can be built directly or loaded from ``HOOKER_*`` environment
variables with ``from_env()``.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

DEFAULT_BASE_URL = "https://hooker.monster"


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


class ApiClientConfig(BaseModel):
    """Configuration for the REST client.

    Attributes:
        base_url: Base URL of the Hooker instance. An empty string keeps
            request paths relative.
        token: Access token sent as ``Authorization: Token <token>`` (optional
            when a custom auth provider is used)
        timeout: HTTP timeout in seconds
    """

    base_url: str = DEFAULT_BASE_URL
    token: Optional[str] = Field(default=None, repr=False)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v[:-1] if v.endswith("/") else v

    @classmethod
    def from_env(cls) -> ApiClientConfig:
        """Load configuration from environment variables.

        Optional environment variables:
            HOOKER_BASE_URL: Base URL (default: https://hooker.monster)
            HOOKER_TOKEN: Access token
            HOOKER_TIMEOUT: HTTP timeout in seconds (default: 30)
        """
        return cls(
            base_url=os.getenv("HOOKER_BASE_URL", DEFAULT_BASE_URL),
            token=os.getenv("HOOKER_TOKEN") or None,
            timeout=float(os.getenv("HOOKER_TIMEOUT", "30")),
        )


class MQTTClientConfig(BaseModel):
    """Configuration for the live notification client.

    Attributes:
        keepalive: MQTT protocol keepalive interval in seconds
        connect_timeout: Seconds to wait for the broker to accept a connection
        clean_session: Whether the broker should discard session state on connect
        reconnect: Whether the transport reconnects by itself after losing the broker
        reconnect_min_delay: Min reconnection backoff delay in seconds
        reconnect_max_delay: Max reconnection backoff delay in seconds
        hook_id: Scope broker credentials to a single hook instead of the
            whole user account
    """

    keepalive: int = Field(default=60, ge=1, le=3600)
    connect_timeout: float = Field(default=30.0, gt=0)
    clean_session: bool = True
    reconnect: bool = True
    reconnect_min_delay: float = Field(default=0.5, ge=0.1)
    reconnect_max_delay: float = Field(default=5.0, ge=0.5)
    hook_id: Optional[str] = None

    @field_validator("reconnect_max_delay")
    @classmethod
    def validate_reconnect_delays(cls, v: float, info: ValidationInfo) -> float:
        """Ensure reconnect_max_delay >= reconnect_min_delay."""
        if "reconnect_min_delay" in info.data:
            min_delay = info.data["reconnect_min_delay"]
            if v < min_delay:
                raise ValueError(
                    f"reconnect_max_delay ({v}) must be >= "
                    f"reconnect_min_delay ({min_delay})"
                )
        return v

    @classmethod
    def from_env(cls) -> MQTTClientConfig:
        """Load configuration from environment variables.

        Optional environment variables:
            HOOKER_MQTT_KEEPALIVE: Protocol keepalive interval (default: 60)
            HOOKER_MQTT_CONNECT_TIMEOUT: Connect timeout (default: 30)
            HOOKER_MQTT_CLEAN_SESSION: Clean session flag (default: true)
            HOOKER_MQTT_RECONNECT: Automatic reconnect (default: true)
            HOOKER_MQTT_RECONNECT_MIN_DELAY: Min backoff delay (default: 0.5)
            HOOKER_MQTT_RECONNECT_MAX_DELAY: Max backoff delay (default: 5.0)
            HOOKER_MQTT_HOOK_ID: Hook to scope credentials to (default: user-wide)

        Raises:
            ValueError: If validation fails
        """
        return cls(
            keepalive=int(os.getenv("HOOKER_MQTT_KEEPALIVE", "60")),
            connect_timeout=float(os.getenv("HOOKER_MQTT_CONNECT_TIMEOUT", "30")),
            clean_session=_env_bool("HOOKER_MQTT_CLEAN_SESSION", True),
            reconnect=_env_bool("HOOKER_MQTT_RECONNECT", True),
            reconnect_min_delay=float(os.getenv("HOOKER_MQTT_RECONNECT_MIN_DELAY", "0.5")),
            reconnect_max_delay=float(os.getenv("HOOKER_MQTT_RECONNECT_MAX_DELAY", "5.0")),
            hook_id=os.getenv("HOOKER_MQTT_HOOK_ID") or None,
        )


__all__ = ["ApiClientConfig", "DEFAULT_BASE_URL", "MQTTClientConfig"]
