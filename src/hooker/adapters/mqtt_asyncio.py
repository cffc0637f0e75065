"""asyncio-mqtt backed broker transport.

Owns one ``asyncio_mqtt.Client`` at a time, pumps received messages into
``on_message`` and, when the broker connection drops, reconnects with
exponential backoff using the credentials of the last ``connect()``.
``on_reconnect`` is awaited after every successful automatic reconnect so
the owner can restore its subscriptions.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any, Callable, Optional

import asyncio_mqtt as mqtt

from hooker.config.broker import ConnectionParams
from hooker.domain.ports import MessageCallback, ReconnectCallback
from hooker.errors import ConnectionFailedError, SubscribeError, UnsubscribeError

logger = logging.getLogger(__name__)

# SUBACK return code for a refused subscription (MQTT 3.1.1 and 5).
SUBACK_FAILURE = 0x80


class AsyncioMQTTTransport:
    """Transport implementation backed by an asyncio-mqtt client."""

    def __init__(
        self,
        *,
        qos: int = 0,
        reconnect: bool = True,
        reconnect_min_delay: float = 0.5,
        reconnect_max_delay: float = 5.0,
        client_factory: Callable[..., mqtt.Client] = mqtt.Client,
    ) -> None:
        self.on_message: Optional[MessageCallback] = None
        self.on_reconnect: Optional[ReconnectCallback] = None

        self._qos = qos
        self._reconnect = reconnect
        self._reconnect_min_delay = reconnect_min_delay
        self._reconnect_max_delay = reconnect_max_delay
        self._client_factory = client_factory

        self._client: Optional[mqtt.Client] = None
        self._connect_kwargs: dict[str, Any] = {}
        self._timeout: float = 30.0
        self._pump_task: Optional[asyncio.Task[None]] = None
        self._connected = False
        self._closing = False

    @property
    def client(self) -> Optional[mqtt.Client]:
        """Underlying asyncio-mqtt client, None while disconnected."""
        return self._client

    def is_connected(self) -> bool:
        return self._connected

    # --- Lifecycle ---

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
    ) -> None:
        """Open the broker connection and start the message pump.

        Raises:
            ConnectionFailedError: If the broker rejects or cannot be reached
        """
        if self._connected:
            logger.debug("Already connected, skipping connect()")
            return

        self._closing = False
        self._timeout = timeout
        self._connect_kwargs = {
            "hostname": params.hostname,
            "port": params.port,
            "username": username or None,
            "password": password or None,
            "client_id": client_id,
            "keepalive": keepalive,
            "clean_session": clean_session,
            "transport": params.transport,
            "websocket_path": params.websocket_path,
            "tls_context": ssl.create_default_context() if params.tls else None,
        }
        await self._open()

        logger.info(
            "Connected to MQTT broker at %s:%d (client_id=%s transport=%s tls=%s)",
            params.hostname,
            params.port,
            client_id,
            params.transport,
            params.tls,
        )
        self._pump_task = asyncio.create_task(self._pump())

    async def disconnect(self) -> None:
        """Stop the pump and close the broker connection.

        Safe to call when not connected (no-op).
        """
        self._closing = True

        if self._pump_task:
            self._pump_task.cancel()
            try:
                await asyncio.wait_for(self._pump_task, timeout=1.0)
            except (asyncio.CancelledError, asyncio.TimeoutError):
                pass
            self._pump_task = None

        client, self._client = self._client, None
        was_connected, self._connected = self._connected, False
        if client is not None and was_connected:
            try:
                await client.__aexit__(None, None, None)
            except mqtt.MqttError as exc:
                logger.warning("Error while disconnecting from MQTT broker: %s", exc)
            logger.info("Disconnected from MQTT broker")

    async def _open(self) -> None:
        client = self._client_factory(**self._connect_kwargs)
        try:
            await asyncio.wait_for(client.__aenter__(), timeout=self._timeout)
        except (mqtt.MqttError, asyncio.TimeoutError) as exc:
            raise ConnectionFailedError(
                f"Could not connect to MQTT broker at "
                f"{self._connect_kwargs['hostname']}:{self._connect_kwargs['port']}: {exc!r}"
            ) from exc
        self._client = client
        self._connected = True

    # --- Subscriptions ---

    async def subscribe(self, topic: str) -> None:
        client = self._require_client(topic, SubscribeError)
        try:
            granted = await client.subscribe(topic, qos=self._qos)
        except mqtt.MqttError as exc:
            raise SubscribeError(topic, f"Failed to subscribe to {topic!r}: {exc}") from exc
        if _refused(granted):
            raise SubscribeError(topic, f"Broker refused subscription to {topic!r}")
        logger.debug("Subscribed to topic: %s (qos=%d)", topic, self._qos)

    async def unsubscribe(self, topic: str) -> None:
        client = self._require_client(topic, UnsubscribeError)
        try:
            await client.unsubscribe(topic)
        except mqtt.MqttError as exc:
            raise UnsubscribeError(topic, f"Failed to unsubscribe from {topic!r}: {exc}") from exc
        logger.debug("Unsubscribed from topic: %s", topic)

    def _require_client(self, topic: str, error: type) -> mqtt.Client:
        if not self._connected or self._client is None:
            raise error(topic, "Not connected to MQTT broker")
        return self._client

    # --- Message pump ---

    async def _pump(self) -> None:
        """Deliver messages until disconnect, reconnecting when the broker drops."""
        try:
            while True:
                client = self._client
                assert client is not None, "Client must be set before pumping"
                try:
                    async with client.messages() as messages:
                        async for message in messages:
                            self._deliver(message)
                    return
                except mqtt.MqttError as exc:
                    if self._closing:
                        return
                    logger.warning("Lost connection to MQTT broker: %s", exc)

                self._connected = False
                self._client = None
                if not self._reconnect:
                    logger.error("Automatic reconnect disabled, giving up on MQTT broker")
                    return

                await self._reconnect_with_backoff()
                if self.on_reconnect is not None:
                    try:
                        await self.on_reconnect()
                    except Exception as exc:
                        logger.error("Reconnect hook failed: %s", exc, exc_info=True)
        except asyncio.CancelledError:
            logger.debug("Message pump task cancelled")
            raise

    async def _reconnect_with_backoff(self) -> None:
        delay = self._reconnect_min_delay
        attempt = 0
        while True:
            attempt += 1
            await asyncio.sleep(delay)
            try:
                await self._open()
            except ConnectionFailedError as exc:
                logger.warning("Reconnect attempt %d failed: %s (next in %.1fs)", attempt, exc, delay)
                delay = min(delay * 2, self._reconnect_max_delay)
                continue
            logger.info("Reconnected to MQTT broker after %d attempt(s)", attempt)
            return

    def _deliver(self, message: mqtt.Message) -> None:
        topic = str(message.topic)

        payload_raw = message.payload
        if isinstance(payload_raw, bytes):
            payload = payload_raw
        elif isinstance(payload_raw, bytearray):
            payload = bytes(payload_raw)
        elif isinstance(payload_raw, str):
            payload = payload_raw.encode("utf-8")
        elif payload_raw is None:
            payload = b""
        else:
            logger.warning("Unexpected payload type %s on %s, skipping", type(payload_raw), topic)
            return

        if self.on_message is None:
            logger.debug("No message callback set, dropping message on %s", topic)
            return

        try:
            self.on_message(topic, payload)
        except Exception as exc:
            logger.error("Error in message callback for topic %s: %s", topic, exc, exc_info=True)


def _refused(granted: Any) -> bool:
    if not granted:
        return False
    for code in granted:
        value = getattr(code, "value", code)
        if isinstance(value, int) and value >= SUBACK_FAILURE:
            return True
    return False


__all__ = ["AsyncioMQTTTransport"]
