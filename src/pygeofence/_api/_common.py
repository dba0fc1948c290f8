"""Shared helpers for REST endpoint modules.

This module is internal to pygeofence and may change at any time.
"""

from __future__ import annotations

from typing import Any

from pygeofence.exceptions import GeofenceApiError


def extract_list(body: Any, key: str, *, endpoint: str) -> list[dict[str, Any]]:
    """Return ``body[key]`` as a list of objects.

    The backend wraps collections in an object (``{"vehicles": [...]}``);
    a missing or null key means an empty collection.
    """
    if isinstance(body, list):
        items: Any = body
    elif isinstance(body, dict):
        items = body.get(key) or []
    else:
        raise GeofenceApiError(f"{endpoint} returned unexpected body type {type(body).__name__}", endpoint=endpoint)
    if not isinstance(items, list):
        raise GeofenceApiError(f"{endpoint} field {key!r} is not a list", endpoint=endpoint)
    return [item for item in items if isinstance(item, dict)]


def extract_object(body: Any, key: str) -> dict[str, Any]:
    """Return ``body[key]`` when the backend wraps a single object, else *body*."""
    if isinstance(body, dict):
        inner = body.get(key)
        if isinstance(inner, dict):
            return inner
        return body
    return {}
