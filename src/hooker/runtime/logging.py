"""Structured logging for the client.

Client modules log through the standard ``logging`` package and attach
context (broker client id, credential scope, topic, pattern) with
``extra=``. ``ContextLogger`` binds that context once per client and
``JsonFormatter`` renders it as one JSON object per line.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import os
from typing import Any, Mapping, MutableMapping, Optional, Protocol, TextIO

import orjson

PACKAGE_LOGGER = "hooker"
REDACTED = "***"
PAYLOAD_PREVIEW = 256

_SECRET_KEYS = frozenset({"password", "token", "authorization"})
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class Logger(Protocol):
    """Minimal logger protocol accepted wherever a logger can be injected."""

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter adding bound context to every record.

    Fields given per call through ``extra=`` win over bound ones.

    Example:
        ```python
        log = ContextLogger(logging.getLogger(__name__), {"scope": "user"})
        log = log.bind(client_id="hooker-1700000000000")
        log.info("Subscribed to %s", pattern, extra={"pattern": pattern})
        ```
    """

    def __init__(self, logger: logging.Logger, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(logger, dict(context or {}))

    @property
    def context(self) -> dict[str, Any]:
        return dict(self.extra or {})

    def bind(self, **fields: Any) -> ContextLogger:
        return ContextLogger(self.logger, {**self.context, **fields})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.context, **(kwargs.get("extra") or {})}
        return msg, kwargs


def _scrub(key: str, value: Any) -> Any:
    if key.lower() in _SECRET_KEYS:
        return REDACTED
    if isinstance(value, Mapping):
        return {k: _scrub(str(k), v) for k, v in value.items()}
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value[:PAYLOAD_PREVIEW]).decode("utf-8", errors="replace")
        return text + "..." if len(value) > PAYLOAD_PREVIEW else text
    return value


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Context fields are merged at the top level. Secret-looking keys are
    masked (also inside nested mappings) and raw payload bytes are shown as
    a truncated text preview.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_") or key in entry:
                continue
            entry[key] = _scrub(key, value)

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)

        return orjson.dumps(entry, default=repr).decode()


def configure_logging(
    level: Optional[str] = None,
    *,
    name: str = PACKAGE_LOGGER,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Send the client's logs to ``stream`` (stderr by default) as JSON lines.

    Only the ``hooker`` logger tree is configured; the root logger is left
    alone. Calling this again replaces the handler installed before.

    Args:
        level: Log level name (default: ``HOOKER_LOG_LEVEL`` or ``INFO``)
        name: Logger to return, usually a child of ``hooker``
        stream: Output stream

    Returns:
        The logger called ``name``
    """
    package = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            package.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    package.addHandler(handler)
    package.setLevel((level or os.getenv("HOOKER_LOG_LEVEL", "INFO")).upper())
    package.propagate = False
    return logging.getLogger(name)


__all__ = ["ContextLogger", "JsonFormatter", "Logger", "PACKAGE_LOGGER", "configure_logging"]
