"""Live alert-stream event model and decoder."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from pygeofence.exceptions import GeofenceDecodeError
from pygeofence.models._base import GeofenceBaseModel, Timestamp
from pygeofence.models.geofence import GeofenceCategory


class EventType(StrEnum):
    """Direction of a geofence crossing."""

    ENTRY = "entry"
    EXIT = "exit"

    @property
    def verb(self) -> str:
        return "entered" if self is EventType.ENTRY else "exited"


class VehicleRef(GeofenceBaseModel):
    """Vehicle summary embedded in an alert."""

    id: str
    vehicle_number: str
    driver_name: str = ""


class GeofenceRef(GeofenceBaseModel):
    """Geofence summary embedded in an alert."""

    id: str
    geofence_name: str
    category: GeofenceCategory = GeofenceCategory.UNKNOWN


class AlertEvent(GeofenceBaseModel):
    """A geofence crossing pushed by the server.

    Instances are frozen; the feed never mutates them in place.

    Parameters
    ----------
    vehicle : VehicleRef
        Vehicle that crossed the boundary.
    geofence : GeofenceRef
        Boundary that was crossed.
    event_type : EventType
        ``entry`` or ``exit``.
    timestamp : datetime
        Server-assigned detection time (UTC-aware).
    """

    vehicle: VehicleRef
    geofence: GeofenceRef
    event_type: EventType
    timestamp: Timestamp

    @property
    def summary(self) -> str:
        """Human-readable notice, e.g. ``"KA-01-AB-1234 entered Depot"``."""
        return f"{self.vehicle.vehicle_number} {self.event_type.verb} {self.geofence.geofence_name}"


def decode_alert_event(payload: str | bytes | bytearray) -> AlertEvent:
    """Decode one serialized alert-stream message.

    Raises
    ------
    GeofenceDecodeError
        When the payload is not valid JSON, not an object, or does not
        match the alert schema.
    """
    try:
        parsed: Any = json.loads(payload)
    except (ValueError, TypeError, RecursionError) as exc:
        raise GeofenceDecodeError(f"Alert payload is not JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise GeofenceDecodeError(f"Alert payload must be a JSON object, got {type(parsed).__name__}")
    try:
        return AlertEvent.model_validate(parsed)
    except ValidationError as exc:
        raise GeofenceDecodeError(f"Alert payload does not match schema: {exc.error_count()} error(s)") from exc
    except (ValueError, OverflowError, OSError, RecursionError) as exc:
        raise GeofenceDecodeError(f"Alert payload has out-of-range values: {exc}") from exc
