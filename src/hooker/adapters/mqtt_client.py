"""Live notification client for Hooker.

Connects to the Hooker MQTT broker with short-lived credentials obtained
from the REST API and fans received notifications out to subscribed
callbacks.

Subscription rules:
- Patterns may use ``+`` (one level) and a trailing ``#`` (any remaining
  levels, including none).
- A callback subscribed under several patterns that match the same topic
  runs once per message.
- Subscribing before ``connect()`` is allowed: the pattern is registered
  locally and subscribed at the broker when the connection opens.
- While connected, a new pattern is only registered once the broker has
  acknowledged the subscription.
- The broker subscription for a pattern is dropped when its last callback
  is cancelled.
- After ``disconnect()`` the registered patterns are kept and restored by
  the next ``connect()``; the same happens after an automatic transport
  reconnect.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional, Type, Union

from pydantic import BaseModel

from hooker.adapters.mqtt_asyncio import AsyncioMQTTTransport
from hooker.config.broker import parse_broker_url
from hooker.config.models import MQTTClientConfig
from hooker.contracts.topics import TopicRoute
from hooker.domain.ports import CredentialSource, Transport
from hooker.errors import (
    ClientClosedError,
    ConnectionFailedError,
    HookerError,
    PayloadDecodeError,
)
from hooker.runtime.logging import ContextLogger
from hooker.runtime.registry import SubscriptionRegistry
from hooker.runtime.subscription import Callback, Sub, Subscription

logger = logging.getLogger(__name__)

ErrorReporter = Callable[[HookerError], None]
"""Receives errors that have no awaiting caller, such as undecodable payloads."""


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class HookerMQTTClient:
    """Subscribe to live Hooker notifications.

    Example:
        ```python
        async with ApiClient("my-token") as api:
            async with HookerMQTTClient(api) as mqtt:
                def on_event(event: EventDto) -> None:
                    print(event.method, event.path)

                sub = await mqtt.subscribe(topics.hook_events(hook.id), on_event)
                ...
                sub.cancel()
        ```
    """

    def __init__(
        self,
        api: CredentialSource,
        *,
        config: Optional[MQTTClientConfig] = None,
        transport: Optional[Transport] = None,
        on_error: Optional[ErrorReporter] = None,
    ) -> None:
        """Create a client.

        Args:
            api: Source of the broker address and credentials (usually ``ApiClient``)
            config: Client configuration (defaults to ``MQTTClientConfig()``)
            transport: Broker transport (defaults to ``AsyncioMQTTTransport``)
            on_error: Called with errors no caller is waiting for, such as a
                payload that is not JSON. Defaults to logging them.
        """
        self._api = api
        self._config = config or MQTTClientConfig()
        self._transport: Transport = transport or AsyncioMQTTTransport(
            reconnect=self._config.reconnect,
            reconnect_min_delay=self._config.reconnect_min_delay,
            reconnect_max_delay=self._config.reconnect_max_delay,
        )
        self._transport.on_message = self._on_message
        self._transport.on_reconnect = self._on_transport_reconnect
        self._on_error = on_error or _log_error
        self._log = ContextLogger(logger, {"scope": self._config.hook_id or "user"})

        self._registry = SubscriptionRegistry()
        self._state = ConnectionState.DISCONNECTED
        self._closed = False

        # Patterns acknowledged by the broker on the current connection
        self._remote: set[str] = set()
        self._inflight: dict[str, asyncio.Future[None]] = {}
        self._waiters: dict[str, int] = {}
        self._connecting: Optional[asyncio.Future[None]] = None
        self._connect_aborted = False
        self._background: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def client_config(self) -> MQTTClientConfig:
        return self._config

    def patterns(self) -> list[str]:
        """Patterns with at least one registered callback."""
        return self._registry.patterns()

    async def __aenter__(self) -> HookerMQTTClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # --- Lifecycle ---

    async def connect(self) -> None:
        """Open the broker connection and restore every registered pattern.

        Concurrent callers share the attempt in progress and see its outcome.
        A ``disconnect()`` issued while connecting aborts the attempt.

        Raises:
            ClientClosedError: If the client was closed
            ConnectionFailedError: If the broker rejects the connection or the
                attempt was aborted by ``disconnect()``
            ApiError: If broker configuration or credentials cannot be fetched
        """
        while True:
            if self._closed:
                raise ClientClosedError("Cannot connect: client is closed")
            if self._state is ConnectionState.CONNECTED:
                return
            pending = self._connecting
            if pending is None:
                break
            if not self._connect_aborted:
                await asyncio.shield(pending)
                return
            # Aborted attempt still unwinding, start over once it is gone
            await asyncio.wait([pending])

        attempt: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        attempt.add_done_callback(_consume_outcome)
        self._connecting = attempt
        self._connect_aborted = False
        self._state = ConnectionState.CONNECTING
        try:
            await self._open()
            self._check_aborted()
            await self._reconcile()
            self._check_aborted()
        except BaseException as exc:
            self._state = ConnectionState.DISCONNECTED
            self._remote.clear()
            try:
                if self._transport.is_connected():
                    await asyncio.shield(self._transport.disconnect())
            finally:
                self._finish_attempt(attempt, exc)
            raise

        self._state = ConnectionState.CONNECTED
        self._finish_attempt(attempt, None)
        self._log.info("MQTT client connected with %d subscription(s)", len(self._registry))

    def _check_aborted(self) -> None:
        if self._connect_aborted:
            raise ConnectionFailedError("Connection attempt aborted by disconnect()")

    def _finish_attempt(self, attempt: asyncio.Future[None], exc: Optional[BaseException]) -> None:
        self._connecting = None
        if exc is None:
            attempt.set_result(None)
        elif isinstance(exc, asyncio.CancelledError):
            attempt.set_exception(ConnectionFailedError("Connection attempt was cancelled"))
        else:
            attempt.set_exception(exc)

    async def _open(self) -> None:
        app_config = await self._api.get_config()
        hook_id = self._config.hook_id
        if hook_id:
            credentials = await self._api.get_mqtt_auth_hook(hook_id)
        else:
            credentials = await self._api.get_mqtt_auth_user()

        params = parse_broker_url(app_config.mqtt.broker_url)
        client_id = f"{app_config.mqtt.client_id_prefix}{int(time.time() * 1000)}"
        self._log = self._log.bind(client_id=client_id)
        self._log.debug("Opening broker connection %s", params, extra={"broker": params.hostname})

        await self._transport.connect(
            params,
            client_id=client_id,
            username=credentials.username,
            password=credentials.password,
            keepalive=self._config.keepalive,
            clean_session=self._config.clean_session,
            timeout=self._config.connect_timeout,
        )

    async def disconnect(self) -> None:
        """Close the broker connection, keeping registered patterns for the next connect().

        A connect() still in progress is aborted and fails with
        ``ConnectionFailedError``. Safe to call when not connected (no-op).
        """
        if self._state is ConnectionState.CONNECTING:
            self._connect_aborted = True
            self._state = ConnectionState.DISCONNECTED
            self._log.info("Connect in progress aborted by disconnect()")
            if not self._transport.is_connected():
                return
        elif self._state is ConnectionState.DISCONNECTED and not self._transport.is_connected():
            return
        await self._transport.disconnect()
        self._remote.clear()
        self._state = ConnectionState.DISCONNECTED
        self._log.info("MQTT client disconnected (%d pattern(s) retained)", len(self._registry))

    async def close(self) -> None:
        """Disconnect and drop every subscription. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self.disconnect()
        self._registry.clear()
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        self._background.clear()

    # --- Subscriptions ---

    async def subscribe(
        self,
        pattern: Union[str, TopicRoute],
        callback: Callback,
        *,
        model: Optional[Type[BaseModel]] = None,
    ) -> Subscription:
        """Register ``callback`` for messages whose topic matches ``pattern``.

        Args:
            pattern: Topic pattern, or a ``TopicRoute`` carrying its payload model
            callback: Called with the decoded payload. May return an awaitable,
                which is scheduled on the running loop.
            model: Pydantic model the JSON payload is validated into before the
                callback runs (defaults to the route's model; raw JSON otherwise)

        Returns:
            Handle whose ``cancel()`` removes this callback again

        Raises:
            ClientClosedError: If the client was closed
            SubscribeError: If the broker did not acknowledge a new pattern
        """
        if isinstance(pattern, TopicRoute):
            model = model or pattern.model
            pattern = pattern.pattern

        if self._closed:
            raise ClientClosedError("Cannot subscribe: client is closed")

        if pattern not in self._registry and self._state is ConnectionState.CONNECTED:
            await self._subscribe_remote(pattern)

        sub = self._registry.add(pattern, callback, model)
        count = len(self._registry.subscribers(pattern))
        self._log.info("Subscribed to %s (%d callback(s))", pattern, count, extra={"pattern": pattern})
        return Subscription(sub, self._cancel)

    async def _subscribe_remote(self, pattern: str) -> None:
        """Subscribe at the broker, sharing one round-trip between concurrent callers."""
        pending = self._inflight.get(pattern)
        if pending is None or pending.done():
            pending = asyncio.ensure_future(self._transport.subscribe(pattern))
            self._inflight[pattern] = pending
            pending.add_done_callback(lambda fut: self._subscribe_done(pattern, fut))

        self._waiters[pattern] = self._waiters.get(pattern, 0) + 1
        try:
            await asyncio.shield(pending)
        except asyncio.CancelledError:
            if self._waiters[pattern] == 1:
                # Nobody is left to register the pattern once the broker acknowledges it
                pending.add_done_callback(self._subscribe_abandoned)
            raise
        finally:
            self._waiters[pattern] -= 1
            if not self._waiters[pattern]:
                del self._waiters[pattern]

    def _subscribe_done(self, pattern: str, fut: asyncio.Future[None]) -> None:
        if self._inflight.get(pattern) is fut:
            del self._inflight[pattern]
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is None:
            self._remote.add(pattern)
        else:
            self._log.warning("Broker subscribe failed for %s: %s", pattern, exc, extra={"pattern": pattern})

    def _subscribe_abandoned(self, fut: asyncio.Future[None]) -> None:
        if self._state is ConnectionState.CONNECTED:
            self._drop_orphans()

    def _drop_orphans(self) -> None:
        """Unsubscribe broker subscriptions that no callback or pending subscribe needs."""
        for pattern in self._remote - set(self._registry.patterns()) - set(self._waiters):
            self._log.debug("Dropping broker subscription %s with no callbacks", pattern, extra={"pattern": pattern})
            self._remote.discard(pattern)
            self._spawn(self._unsubscribe_remote(pattern))

    def _cancel(self, sub: Sub) -> None:
        if not self._registry.remove(sub):
            return

        pattern = sub.pattern
        self._log.info("Last callback for %s cancelled", pattern, extra={"pattern": pattern})
        if self._state is not ConnectionState.CONNECTED:
            return

        self._remote.discard(pattern)
        self._spawn(self._unsubscribe_remote(pattern))

    async def _unsubscribe_remote(self, pattern: str) -> None:
        try:
            await self._transport.unsubscribe(pattern)
        except HookerError as exc:
            self._log.warning("Broker unsubscribe failed for %s: %s", pattern, exc, extra={"pattern": pattern})

    async def _reconcile(self) -> None:
        """Make the broker's subscriptions match the registry.

        Every registered pattern is (re)subscribed; the broker treats
        repeated subscriptions as a no-op. Failures are logged and retried
        on the next connect or reconnect. Patterns registered while the
        round-trips are in flight are picked up before returning.
        """
        attempted: set[str] = set()
        while True:
            desired = [p for p in self._registry.patterns() if p not in attempted]
            if not desired:
                break
            attempted.update(desired)
            results = await asyncio.gather(
                *(self._transport.subscribe(pattern) for pattern in desired),
                return_exceptions=True,
            )
            for pattern, result in zip(desired, results):
                if isinstance(result, BaseException):
                    self._log.warning(
                        "Failed to restore subscription %s: %s", pattern, result, extra={"pattern": pattern}
                    )
                else:
                    self._remote.add(pattern)

        # Patterns whose last callback was cancelled while restoring
        self._drop_orphans()

    async def _on_transport_reconnect(self) -> None:
        self._log.info("Transport reconnected, restoring %d subscription(s)", len(self._registry))
        self._remote.clear()
        await self._reconcile()

    def _spawn(self, coro: Any) -> None:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            self._log.warning("No running event loop, skipping broker call")
            return
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    # --- Inbound ---

    def _on_message(self, topic: str, payload: bytes) -> None:
        try:
            delivered = self._registry.dispatch(topic, payload)
        except PayloadDecodeError as exc:
            self._report(exc)
            return
        if not delivered:
            self._log.debug("No subscriber for topic: %s", topic, extra={"topic": topic})

    def _report(self, error: HookerError) -> None:
        try:
            self._on_error(error)
        except Exception:
            self._log.exception("Error reporter failed while handling: %s", error)


def _log_error(error: HookerError) -> None:
    logger.error("%s", error, exc_info=error)


def _consume_outcome(fut: asyncio.Future[None]) -> None:
    """Retrieve a failed attempt's exception when no other caller awaited it."""
    if not fut.cancelled():
        fut.exception()


__all__ = ["ConnectionState", "ErrorReporter", "HookerMQTTClient"]
