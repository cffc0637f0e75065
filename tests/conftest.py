"""Shared pytest fixtures for hooker client tests."""

import asyncio
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from hooker.config.broker import ConnectionParams
from hooker.contracts.v1 import AppConfigDto, MqttJwtConfigDto
from hooker.errors import ConnectionFailedError, SubscribeError, UnsubscribeError


class FakeTransport:
    """In-memory Transport recording every broker round-trip.

    Failures are injected per pattern; ``gate`` holds subscribe round-trips
    and ``connect_gate`` holds connect until set, so tests can observe
    in-flight behaviour.
    """

    def __init__(self) -> None:
        self.on_message = None
        self.on_reconnect = None
        self.calls: list[tuple[str, str]] = []
        self.connect_params: Optional[ConnectionParams] = None
        self.connect_kwargs: dict = {}
        self.fail_connect: Optional[Exception] = None
        self.fail_subscribe: set[str] = set()
        self.fail_unsubscribe: set[str] = set()
        self.gate: Optional[asyncio.Event] = None
        self.connect_gate: Optional[asyncio.Event] = None
        self._connected = False

    async def connect(self, params, **kwargs) -> None:
        self.calls.append(("connect", params.hostname))
        if self.connect_gate is not None:
            await self.connect_gate.wait()
        if self.fail_connect is not None:
            raise self.fail_connect
        self.connect_params = params
        self.connect_kwargs = kwargs
        self._connected = True

    async def subscribe(self, topic: str) -> None:
        self.calls.append(("subscribe", topic))
        if self.gate is not None:
            await self.gate.wait()
        if topic in self.fail_subscribe:
            raise SubscribeError(topic)

    async def unsubscribe(self, topic: str) -> None:
        self.calls.append(("unsubscribe", topic))
        if topic in self.fail_unsubscribe:
            raise UnsubscribeError(topic)

    async def disconnect(self) -> None:
        self.calls.append(("disconnect", ""))
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def deliver(self, topic: str, payload) -> None:
        """Simulate a message arriving from the broker."""
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        self.on_message(topic, payload)

    def subscribed(self) -> list[str]:
        return [topic for call, topic in self.calls if call == "subscribe"]

    def unsubscribed(self) -> list[str]:
        return [topic for call, topic in self.calls if call == "unsubscribe"]


class FakeMessages:
    """Stand-in for ``asyncio_mqtt.Client.messages()``.

    Yields ``messages`` and then raises ``error`` if given. Otherwise, with
    ``block``, it waits forever like a live connection.
    """

    def __init__(self, messages, *, error: Optional[BaseException] = None, block: bool = True) -> None:
        self._messages = list(messages)
        self._error = error
        self._block = block

    async def __aenter__(self):
        return self._stream()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def _stream(self):
        for message in self._messages:
            yield message
        if self._error is not None:
            raise self._error
        if self._block:
            await asyncio.Event().wait()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def app_config() -> AppConfigDto:
    return AppConfigDto.model_validate(
        {
            "mqtt": {"brokerUrl": "wss://broker.example.com/mqtt", "clientIdPrefix": "hooker-test-"},
            "smtpBaseDomain": None,
        }
    )


@pytest.fixture
def mqtt_credentials() -> MqttJwtConfigDto:
    return MqttJwtConfigDto.model_validate(
        {"username": "user-1", "password": "jwt-secret", "expiresAt": 1_900_000_000_000}
    )


@pytest.fixture
def fake_api(app_config, mqtt_credentials):
    """Mock CredentialSource returning a websocket broker and user credentials."""
    api = MagicMock()
    api.get_config = AsyncMock(return_value=app_config)
    api.get_mqtt_auth_user = AsyncMock(return_value=mqtt_credentials)
    api.get_mqtt_auth_hook = AsyncMock(
        return_value=MqttJwtConfigDto(username="hook-1", password="hook-jwt", expires_at=1_900_000_000_000)
    )
    return api


@pytest.fixture
def connect_failure() -> ConnectionFailedError:
    return ConnectionFailedError("Could not connect to MQTT broker at broker.example.com:443")


@pytest.fixture
def mock_mqtt_client():
    """Mock asyncio_mqtt.Client for unit testing.

    Returns a MagicMock configured with async methods for MQTT operations.
    ``messages()`` yields nothing unless a test replaces it.
    """
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    client.subscribe = AsyncMock(return_value=(0,))
    client.unsubscribe = AsyncMock()
    client.messages = MagicMock(side_effect=lambda: FakeMessages([]))
    return client


@pytest.fixture
def fake_messages():
    """Factory for stand-ins of ``asyncio_mqtt.Client.messages()``."""
    return FakeMessages


@pytest.fixture(autouse=True)
def reset_env(monkeypatch):
    """Reset HOOKER_* environment variables before each test."""
    env_vars = [
        "HOOKER_BASE_URL",
        "HOOKER_TOKEN",
        "HOOKER_TIMEOUT",
        "HOOKER_MQTT_KEEPALIVE",
        "HOOKER_MQTT_CONNECT_TIMEOUT",
        "HOOKER_MQTT_CLEAN_SESSION",
        "HOOKER_MQTT_RECONNECT",
        "HOOKER_MQTT_RECONNECT_MIN_DELAY",
        "HOOKER_MQTT_RECONNECT_MAX_DELAY",
        "HOOKER_MQTT_HOOK_ID",
        "HOOKER_LOG_LEVEL",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires Hooker broker)"
    )
    config.addinivalue_line(
        "markers", "contract: mark test as contract test (validates wire formats)"
    )
