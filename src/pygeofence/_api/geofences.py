"""Geofence endpoints."""

from __future__ import annotations

from pygeofence._api._common import extract_list, extract_object
from pygeofence._transport import Transport
from pygeofence.models.geofence import Geofence, GeofenceCategory, GeofenceCreate

_ENDPOINT = "/geofences"


async def fetch_geofences(
    transport: Transport,
    *,
    category: GeofenceCategory | None = None,
) -> list[Geofence]:
    params = {"category": category.value} if category is not None else None
    body = await transport.request_json("GET", _ENDPOINT, params=params)
    return [Geofence.model_validate(item) for item in extract_list(body, "geofences", endpoint=_ENDPOINT)]


async def create_geofence(transport: Transport, request: GeofenceCreate) -> Geofence | None:
    """Submit a new geofence.

    Returns the stored geofence when the backend echoes it, else ``None``.
    """
    body = await transport.request_json("POST", _ENDPOINT, payload=request.to_payload())
    created = extract_object(body, "geofence")
    if "id" not in created:
        return None
    return Geofence.model_validate(created)
