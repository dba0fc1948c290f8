"""Geofence models."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from pygeofence.models._base import ApiResponseModel, GeofenceBaseModel, GeofenceEnum, Timestamp
from pygeofence.models.geo import ClosedRing, GeoPoint


class GeofenceCategory(GeofenceEnum):
    """Business category of a geofence."""

    UNKNOWN = "unknown"
    DELIVERY_ZONE = "delivery_zone"
    RESTRICTED_ZONE = "restricted_zone"
    TOLL_ZONE = "toll_zone"
    CUSTOMER_AREA = "customer_area"


class Geofence(ApiResponseModel):
    """A stored geofence as returned by ``GET /geofences``."""

    id: str
    name: str = Field(default="", validation_alias=AliasChoices("name", "geofence_name"))
    description: str | None = None
    category: GeofenceCategory = GeofenceCategory.UNKNOWN
    coordinates: tuple[GeoPoint, ...] = ()
    created_at: Timestamp | None = None


class GeofenceCreate(GeofenceBaseModel):
    """Body of ``POST /geofences``."""

    name: str = Field(min_length=1)
    ring: ClosedRing
    category: GeofenceCategory = GeofenceCategory.DELIVERY_ZONE
    description: str = ""

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: GeofenceCategory) -> GeofenceCategory:
        if value is GeofenceCategory.UNKNOWN:
            raise ValueError("category must be one of the known geofence categories")
        return value

    def to_payload(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "coordinates": self.ring.coordinates(),
        }
