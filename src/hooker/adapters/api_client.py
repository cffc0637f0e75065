"""Async REST client for the Hooker API."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

import httpx
import orjson
from pydantic import BaseModel, TypeAdapter

from hooker.config.models import ApiClientConfig
from hooker.contracts.v1 import (
    AppConfigDto,
    ColumnDto,
    EventBookmarkBody,
    EventDto,
    EventsListDto,
    ForwardRuleDto,
    HookCreateBody,
    HookDto,
    HookNameUpdateBody,
    HookVisibilityUpdateBody,
    MqttJwtConfigDto,
    SaveColumnsBody,
)
from hooker.errors import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

AuthProvider = Callable[[], Union[Mapping[str, str], Awaitable[Mapping[str, str]]]]
"""Returns the auth headers for a request, synchronously or not."""


def token_auth(token: str) -> AuthProvider:
    """Auth provider sending ``Authorization: Token <token>``."""
    headers = {"Authorization": f"Token {token}"}
    return lambda: headers


class ApiClient:
    """Lightweight client for the Hooker REST API.

    Example:
        ```python
        async with ApiClient("my-token") as api:
            hook = await api.create_hook(HookCreateBody(id=str(uuid.uuid4())))
            events = await api.get_events(hook.id, limit=20)
        ```
    """

    def __init__(
        self,
        auth: Union[str, AuthProvider, None] = None,
        *,
        config: Optional[ApiClientConfig] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Create a client.

        Args:
            auth: Access token, or a callable returning auth headers (for
                cookie or bearer schemes). Falls back to ``config.token``.
            config: Client configuration (defaults to ``ApiClientConfig()``)
            base_url: Overrides ``config.base_url``. An empty string keeps
                request URLs relative.
            transport: Custom httpx transport (tests, proxies)
        """
        cfg = config or ApiClientConfig()
        if base_url is not None:
            cfg = cfg.model_copy(update={"base_url": base_url.rstrip("/")})
        self._config = cfg

        if auth is None:
            auth = cfg.token
        if isinstance(auth, str):
            self._auth: Optional[AuthProvider] = token_auth(auth)
        else:
            self._auth = auth

        self._http = httpx.AsyncClient(timeout=cfg.timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # --- Transport ---

    async def _headers(self) -> dict[str, str]:
        if self._auth is None:
            return {}
        headers = self._auth()
        if inspect.isawaitable(headers):
            headers = await headers
        return dict(headers)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        headers = await self._headers()
        content: Optional[bytes] = None
        if body is not None:
            if isinstance(body, BaseModel):
                body = body.to_wire() if hasattr(body, "to_wire") else body.model_dump(mode="json")
            content = orjson.dumps(body)
            headers["Content-Type"] = "application/json"

        url = f"{self._config.base_url}{path}"
        logger.debug("api.request %s %s", method, url, extra={"method": method, "path": path})
        response = await self._http.request(method, url, content=content, params=params, headers=headers)

        if response.is_error:
            raise _api_error(response)
        if response.status_code == 204 or not response.content:
            return None
        return orjson.loads(response.content)

    async def _get(self, path: str, model: Type[T], **kwargs: Any) -> T:
        return TypeAdapter(model).validate_python(await self._request("GET", path, **kwargs))

    # --- Hooks ---

    async def create_hook(self, body: HookCreateBody) -> HookDto:
        return HookDto.model_validate(await self._request("POST", "/api/hooks", body=body))

    async def get_hook(self, hook_id: str) -> HookDto:
        return await self._get(f"/api/hooks/{_seg(hook_id)}", HookDto)

    async def update_hook_name(self, hook_id: str, body: HookNameUpdateBody) -> HookDto:
        data = await self._request("POST", f"/api/hooks/{_seg(hook_id)}/name", body=body)
        return HookDto.model_validate(data)

    async def update_hook_visibility(self, hook_id: str, body: HookVisibilityUpdateBody) -> HookDto:
        data = await self._request("POST", f"/api/hooks/{_seg(hook_id)}/visibility", body=body)
        return HookDto.model_validate(data)

    async def get_my_hooks(self) -> list[HookDto]:
        return await self._get("/api/hooks", list[HookDto])

    async def delete_hook(self, hook_id: str) -> None:
        await self._request("DELETE", f"/api/hooks/{_seg(hook_id)}")

    # --- Events ---

    async def get_events(
        self,
        hook_id: str,
        *,
        limit: Optional[int] = None,
        before_ts: Optional[float] = None,
        before_id: Optional[str] = None,
    ) -> EventsListDto:
        """List a hook's events, newest first.

        Pass the previous page's ``next_cursor`` values as ``before_ts`` and
        ``before_id`` to fetch the next page.
        """
        params: dict[str, str] = {}
        if limit:
            params["limit"] = str(limit)
        if before_ts:
            params["beforeTs"] = _number(before_ts)
        if before_id:
            params["beforeId"] = before_id
        return await self._get(f"/api/events/{_seg(hook_id)}", EventsListDto, params=params or None)

    async def bookmark_event(self, event_id: str, state: bool) -> EventDto:
        data = await self._request(
            "POST", f"/api/events/{_seg(event_id)}/bookmark", body=EventBookmarkBody(state=state)
        )
        return EventDto.model_validate(data)

    async def delete_event(self, event_id: str) -> None:
        await self._request("DELETE", f"/api/events/{_seg(event_id)}")

    # --- Columns ---

    async def get_hook_columns(self, hook_id: str) -> list[ColumnDto]:
        return await self._get(f"/api/hooks/{_seg(hook_id)}/columns", list[ColumnDto])

    async def save_hook_columns(self, hook_id: str, body: SaveColumnsBody) -> list[ColumnDto]:
        data = await self._request("POST", f"/api/hooks/{_seg(hook_id)}/columns", body=body)
        return TypeAdapter(list[ColumnDto]).validate_python(data)

    # --- Config ---

    async def get_config(self) -> AppConfigDto:
        return await self._get("/api/config", AppConfigDto)

    async def get_mqtt_auth_user(self) -> MqttJwtConfigDto:
        """Broker credentials covering every hook owned by the caller."""
        return await self._get("/api/config/mqtt-jwt-user", MqttJwtConfigDto)

    async def get_mqtt_auth_hook(self, hook_id: str) -> MqttJwtConfigDto:
        """Broker credentials limited to a single hook."""
        return await self._get(f"/api/config/mqtt-jwt-hook/{_seg(hook_id)}", MqttJwtConfigDto)

    # --- Forward rules ---

    async def get_forward_rules(self, hook_id: str) -> list[ForwardRuleDto]:
        return await self._get(f"/api/hooks/{_seg(hook_id)}/forward-rules", list[ForwardRuleDto])

    async def save_forward_rule(self, hook_id: str, rule: ForwardRuleDto) -> ForwardRuleDto:
        """Create or update a forward rule."""
        data = await self._request("PUT", f"/api/hooks/{_seg(hook_id)}/forward-rules", body=rule)
        return ForwardRuleDto.model_validate(data)

    async def delete_forward_rule(self, hook_id: str, rule_id: str) -> None:
        """Permanently delete a forward rule and its whole history."""
        await self._request("DELETE", f"/api/hooks/{_seg(hook_id)}/forward-rules/{_seg(rule_id)}")


def _seg(value: str) -> str:
    return quote(str(value), safe="")


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _api_error(response: httpx.Response) -> ApiError:
    text = response.text
    message = f"API request failed with status {response.status_code}"
    body: Any = text or None
    if text:
        try:
            body = orjson.loads(text)
        except orjson.JSONDecodeError:
            message += f": {text}"
        else:
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            else:
                message += f": {text}"
    logger.warning(
        "api.error status=%d message=%s",
        response.status_code,
        message,
        extra={"status": response.status_code, "path": response.request.url.path},
    )
    return ApiError(response.status_code, message, body)


__all__ = ["ApiClient", "AuthProvider", "token_auth"]
