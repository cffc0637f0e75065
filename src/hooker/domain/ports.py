from __future__ import annotations

from typing import Awaitable, Callable, Optional, Protocol

from hooker.config.broker import ConnectionParams
from hooker.contracts.v1 import AppConfigDto, MqttJwtConfigDto

MessageCallback = Callable[[str, bytes], None]
ReconnectCallback = Callable[[], Awaitable[None]]


class Transport(Protocol):
    """Broker connection used by the notification client.

    ``connect``/``subscribe``/``unsubscribe`` complete when the broker has
    acknowledged them and raise ``ConnectionFailedError``,
    ``SubscribeError`` or ``UnsubscribeError`` otherwise.
    """

    on_message: Optional[MessageCallback]
    on_reconnect: Optional[ReconnectCallback]

    async def connect(
        self,
        params: ConnectionParams,
        *,
        client_id: str,
        username: str,
        password: str,
        keepalive: int = 60,
        clean_session: bool = True,
        timeout: float = 30.0,
    ) -> None: ...

    async def subscribe(self, topic: str) -> None: ...

    async def unsubscribe(self, topic: str) -> None: ...

    async def disconnect(self) -> None: ...

    def is_connected(self) -> bool: ...


class CredentialSource(Protocol):
    """Provides broker location and short-lived broker credentials."""

    async def get_config(self) -> AppConfigDto: ...

    async def get_mqtt_auth_user(self) -> MqttJwtConfigDto: ...

    async def get_mqtt_auth_hook(self, hook_id: str) -> MqttJwtConfigDto: ...
