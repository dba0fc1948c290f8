"""Violation history endpoint."""

from __future__ import annotations

from pygeofence._transport import Transport
from pygeofence.exceptions import GeofenceApiError
from pygeofence.models.violation import ViolationPage, ViolationQuery

_HISTORY = "/violations/history"


async def fetch_violation_history(transport: Transport, query: ViolationQuery) -> ViolationPage:
    body = await transport.request_json("GET", _HISTORY, params=query.to_params())
    if not isinstance(body, dict):
        raise GeofenceApiError(f"{_HISTORY} returned unexpected body type {type(body).__name__}", endpoint=_HISTORY)
    return ViolationPage.model_validate(body)
