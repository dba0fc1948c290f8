"""Vehicle and vehicle-location endpoints."""

from __future__ import annotations

from urllib.parse import quote

from pygeofence._api._common import extract_list, extract_object
from pygeofence._transport import Transport
from pygeofence.models.vehicle import LocationUpdate, Vehicle, VehicleCreate, VehicleLocation

_VEHICLES = "/vehicles"
_LOCATION = "/vehicles/location"


async def fetch_vehicles(transport: Transport) -> list[Vehicle]:
    body = await transport.request_json("GET", _VEHICLES)
    return [Vehicle.model_validate(item) for item in extract_list(body, "vehicles", endpoint=_VEHICLES)]


async def register_vehicle(transport: Transport, request: VehicleCreate) -> Vehicle | None:
    body = await transport.request_json("POST", _VEHICLES, payload=request.to_payload())
    created = extract_object(body, "vehicle")
    if "id" not in created:
        return None
    return Vehicle.model_validate(created)


async def fetch_vehicle_location(transport: Transport, vehicle_id: str) -> VehicleLocation:
    endpoint = f"{_LOCATION}/{quote(str(vehicle_id), safe='')}"
    body = await transport.request_json("GET", endpoint)
    location = VehicleLocation.model_validate(body if isinstance(body, dict) else {})
    if location.vehicle_id is None:
        location = location.model_copy(update={"vehicle_id": str(vehicle_id)})
    return location


async def update_vehicle_location(transport: Transport, update: LocationUpdate) -> VehicleLocation:
    body = await transport.request_json("POST", _LOCATION, payload=update.to_payload())
    location = VehicleLocation.model_validate(body if isinstance(body, dict) else {})
    if location.vehicle_id is None:
        location = location.model_copy(update={"vehicle_id": update.vehicle_id})
    return location
