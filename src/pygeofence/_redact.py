"""Helpers for safe debug logging.

Alert and vehicle payloads carry driver contact details, and dropped
stream messages can be arbitrarily large.  This module redacts sensitive
fields and truncates long values before they reach DEBUG logs.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "phone",
        "driver_name",
        "password",
        "token",
        "authorization",
        "cookie",
    }
)


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)


def redact_payload_for_log(data: Any, *, max_string: int = 256) -> Any:
    """Redact a serialized websocket frame.

    JSON frames are parsed so key-based redaction applies; anything that
    does not parse is reduced to its type and length.
    """
    if isinstance(data, (str, bytes, bytearray)):
        try:
            parsed = json.loads(data)
        except (ValueError, TypeError, RecursionError):
            return f"<{type(data).__name__}:{len(data)}>"
        return redact_for_log(parsed, max_string=max_string)
    return redact_for_log(data, max_string=max_string)
