"""Alert rule (configured notification) models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pygeofence.models._base import ApiResponseModel, GeofenceBaseModel, Timestamp
from pygeofence.models.alert import EventType


class AlertRule(ApiResponseModel):
    """A configured alert as returned by ``GET /alerts``."""

    alert_id: str
    geofence_id: str | None = None
    geofence_name: str | None = None
    vehicle_id: str | None = None
    vehicle_number: str | None = None
    event_type: EventType
    status: str | None = None
    created_at: Timestamp | None = None

    @property
    def applies_to_all_vehicles(self) -> bool:
        return self.vehicle_id is None


class AlertRuleCreate(GeofenceBaseModel):
    """Body of ``POST /alerts/configure``.

    ``vehicle_id`` is optional: without it the rule covers every vehicle.
    """

    geofence_id: str = Field(min_length=1)
    event_type: EventType = EventType.ENTRY
    vehicle_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "geofence_id": self.geofence_id,
            "event_type": self.event_type.value,
        }
        if self.vehicle_id:
            payload["vehicle_id"] = self.vehicle_id
        return payload
