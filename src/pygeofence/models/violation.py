"""Violation history models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from pygeofence.models._base import ApiResponseModel, GeofenceBaseModel, Timestamp
from pygeofence.models.alert import EventType


class Violation(ApiResponseModel):
    """A persisted crossing record from ``GET /violations/history``."""

    id: str
    vehicle_id: str | None = None
    vehicle_number: str | None = None
    geofence_id: str | None = None
    geofence_name: str | None = None
    event_type: EventType
    latitude: float | None = None
    longitude: float | None = None
    timestamp: Timestamp


class ViolationQuery(GeofenceBaseModel):
    """Filters for ``GET /violations/history``; unset filters are omitted."""

    vehicle_id: str | None = None
    geofence_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int | None = Field(default=50, ge=1)

    @model_validator(mode="after")
    def _check_range(self) -> ViolationQuery:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.vehicle_id:
            params["vehicle_id"] = self.vehicle_id
        if self.geofence_id:
            params["geofence_id"] = self.geofence_id
        if self.start_date:
            params["start_date"] = self.start_date.isoformat()
        if self.end_date:
            params["end_date"] = self.end_date.isoformat()
        if self.limit is not None:
            params["limit"] = str(self.limit)
        return params


class ViolationPage(ApiResponseModel):
    """One page of violation history plus the total match count."""

    violations: tuple[Violation, ...] = ()
    total_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _defaults(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        if merged.get("violations") is None:
            merged["violations"] = ()
        if merged.get("total_count") is None:
            merged["total_count"] = len(merged["violations"])
        return merged
