"""Vehicle and vehicle-location models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from pygeofence.models._base import ApiResponseModel, GeofenceBaseModel, GeofenceEnum, Timestamp
from pygeofence.models.geo import GeoPoint


class VehicleType(GeofenceEnum):
    """Kind of registered vehicle."""

    UNKNOWN = "unknown"
    TRUCK = "truck"
    CAR = "car"
    VAN = "van"
    MOTORCYCLE = "motorcycle"


class Vehicle(ApiResponseModel):
    """A registered vehicle as returned by ``GET /vehicles``."""

    id: str
    vehicle_number: str
    driver_name: str = ""
    vehicle_type: VehicleType = VehicleType.UNKNOWN
    phone: str | None = None
    status: str | None = None
    created_at: Timestamp | None = None


class VehicleCreate(GeofenceBaseModel):
    """Body of ``POST /vehicles``."""

    vehicle_number: str = Field(min_length=1)
    driver_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    vehicle_type: VehicleType = VehicleType.TRUCK

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class LocationUpdate(GeofenceBaseModel):
    """Body of ``POST /vehicles/location``."""

    vehicle_id: str = Field(min_length=1)
    position: GeoPoint
    timestamp: Timestamp = Field(default_factory=lambda: datetime.now(UTC))

    def to_payload(self) -> dict[str, Any]:
        return {
            "vehicle_id": self.vehicle_id,
            "latitude": self.position.latitude,
            "longitude": self.position.longitude,
            "timestamp": self.timestamp.isoformat(),
        }


class CurrentGeofence(ApiResponseModel):
    """A geofence the vehicle is currently inside."""

    geofence_id: str | None = None
    geofence_name: str = ""
    category: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_id(cls, values: Any) -> Any:
        if isinstance(values, dict) and "geofence_id" not in values and "id" in values:
            merged = dict(values)
            merged["geofence_id"] = values["id"]
            return merged
        return values


class VehicleLocation(ApiResponseModel):
    """Reply of ``GET /vehicles/location/{id}`` and ``POST /vehicles/location``."""

    vehicle_id: str | None = None
    current_location: GeoPoint | None = None
    current_geofences: tuple[CurrentGeofence, ...] = ()

    @field_validator("current_geofences", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def is_inside_any(self) -> bool:
        return bool(self.current_geofences)
