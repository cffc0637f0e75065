"""JSONPath evaluation for custom event columns and body-json filters."""

from __future__ import annotations

from typing import Any, Optional

import orjson
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse


def eval_json_path_as_string(src: str | bytes, path: str) -> Optional[str]:
    """Evaluate ``path`` against the JSON document ``src`` and render the result.

    Returns:
        - None if ``src`` is not JSON or ``path`` is not a valid expression
        - "" when nothing matches, or the single match is null or ""
        - the match itself when it is a single string
        - compact JSON text for any other single match, or for several matches

    Examples:
        >>> eval_json_path_as_string('{"name":"John"}', "$.name")
        'John'
        >>> eval_json_path_as_string('{"user":{"name":"Jane"}}', "$.user")
        '{"name":"Jane"}'
        >>> eval_json_path_as_string("invalid json", "$.name") is None
        True
    """
    try:
        document = orjson.loads(src)
    except orjson.JSONDecodeError:
        return None

    try:
        expression = parse(path)
    except (JsonPathLexerError, JsonPathParserError):
        return None

    values: list[Any] = [match.value for match in expression.find(document)]
    if not values:
        return ""

    if len(values) == 1:
        value = values[0]
        if value is None or value == "":
            return ""
        if isinstance(value, str):
            return value
        return orjson.dumps(value).decode()

    return orjson.dumps(values).decode()


__all__ = ["eval_json_path_as_string"]
