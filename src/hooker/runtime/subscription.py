"""Registry entries and the cancellation handles returned to subscribers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Type, Union

from pydantic import BaseModel

Callback = Callable[[Any], Union[None, Awaitable[None]]]


@dataclass(frozen=True, slots=True, eq=False)
class Sub:
    """Describe a subscription binding pattern -> callback.

    Compared by identity: the registry keeps exactly one ``Sub`` per
    (pattern, callback) pair and cancellation handles hold on to it.
    """

    pattern: str
    callback: Callback
    model: Optional[Type[BaseModel]] = None

    def decode(self, data: Any) -> Any:
        if self.model is None:
            return data
        return self.model.model_validate(data)


class Subscription:
    """Cancellation handle returned by ``HookerMQTTClient.subscribe``.

    Cancelling removes exactly the (pattern, callback) pair it was issued
    for. Repeated cancellation is a no-op.
    """

    __slots__ = ("_sub", "_cancel", "_cancelled")

    def __init__(self, sub: Sub, cancel: Callable[[Sub], None]) -> None:
        self._sub = sub
        self._cancel = cancel
        self._cancelled = False

    @property
    def pattern(self) -> str:
        return self._sub.pattern

    @property
    def callback(self) -> Callback:
        return self._sub.callback

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._cancel(self._sub)

    close = cancel

    def __call__(self) -> None:
        self.cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"Subscription(pattern={self.pattern!r}, {state})"


__all__ = ["Callback", "Sub", "Subscription"]
