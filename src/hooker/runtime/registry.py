"""Pattern -> subscriber bookkeeping and inbound message fan-out."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Iterator, Optional, Type

import orjson
from pydantic import BaseModel, ValidationError

from hooker.errors import PayloadDecodeError
from hooker.runtime.logging import Logger
from hooker.runtime.subscription import Callback, Sub
from hooker.runtime.topics import pattern_specificity, split_topic, topic_matches


class SubscriptionRegistry:
    """Map subscription patterns to the callbacks registered for them.

    A pattern is present only while at least one callback is registered
    for it. Callbacks are keyed by the callable itself, so registering the
    same callback twice for a pattern keeps a single delivery entry.
    """

    def __init__(self, *, logger: Optional[Logger] = None) -> None:
        self._subs: dict[str, dict[Callback, Sub]] = {}
        self._logger = logger or logging.getLogger(__name__)
        self._tasks: set[asyncio.Future[Any]] = set()

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._subs

    def __len__(self) -> int:
        return len(self._subs)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._subs))

    def patterns(self) -> list[str]:
        return list(self._subs)

    def subscribers(self, pattern: str) -> list[Sub]:
        return list(self._subs.get(pattern, {}).values())

    def add(self, pattern: str, callback: Callback, model: Optional[Type[BaseModel]] = None) -> Sub:
        """Register ``callback`` for ``pattern`` and return its entry.

        Re-registering an existing pair returns the existing entry unchanged.
        """
        subs = self._subs.setdefault(pattern, {})
        existing = subs.get(callback)
        if existing is not None:
            return existing
        sub = Sub(pattern=pattern, callback=callback, model=model)
        subs[callback] = sub
        return sub

    def remove(self, sub: Sub) -> bool:
        """Remove an entry. Returns True when its pattern is left with no callbacks.

        Entries that are no longer registered (already removed, or dropped by
        ``clear()``) are ignored.
        """
        subs = self._subs.get(sub.pattern)
        if subs is None or subs.get(sub.callback) is not sub:
            return False
        del subs[sub.callback]
        if subs:
            return False
        del self._subs[sub.pattern]
        return True

    def clear(self) -> None:
        self._subs.clear()

    def match(self, topic: str) -> list[Sub]:
        """Collect entries of every pattern matching ``topic``, one per callback.

        When a callback is registered under several matching patterns, the
        entry of the most specific pattern is used (see
        ``pattern_specificity``), so its payload model decides validation.
        Equally specific patterns keep the one registered first.
        """
        topic_parts = split_topic(topic)
        matched: dict[Callback, tuple[tuple[int, int, int], Sub]] = {}
        for pattern, subs in self._subs.items():
            if not topic_matches(pattern, topic_parts):
                continue
            rank = pattern_specificity(pattern)
            for callback, sub in subs.items():
                current = matched.get(callback)
                if current is None or rank > current[0]:
                    matched[callback] = (rank, sub)
        return [sub for _, sub in matched.values()]

    def dispatch(self, topic: str, payload: bytes | str) -> int:
        """Decode ``payload`` as JSON and deliver it to every matching callback.

        Returns the number of callbacks invoked.

        Raises:
            PayloadDecodeError: If the payload is not UTF-8 JSON. No callback
                is invoked in that case.
        """
        raw = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise PayloadDecodeError(topic, raw, str(exc)) from exc

        delivered = 0
        for sub in self.match(topic):
            if self._deliver(sub, topic, data):
                delivered += 1
        return delivered

    def _deliver(self, sub: Sub, topic: str, data: Any) -> bool:
        try:
            value = sub.decode(data)
        except ValidationError as exc:
            self._log_callback_error(sub, topic, f"payload_validation_failed: {exc}")
            return False

        try:
            result = sub.callback(value)
        except Exception as exc:
            self._log_callback_error(sub, topic, str(exc), exc_info=True)
            return True

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(lambda t: self._task_done(t, sub, topic))
        return True

    def _task_done(self, task: asyncio.Future[Any], sub: Sub, topic: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log_callback_error(sub, topic, str(exc), exc_info=exc)

    def _log_callback_error(self, sub: Sub, topic: str, error: str, exc_info: Any = None) -> None:
        self._logger.error(
            "registry.callback.error",
            extra={"topic": topic, "pattern": sub.pattern, "error": error},
            exc_info=exc_info,
        )


__all__ = ["SubscriptionRegistry"]
