"""Data models for the geofencing API and alert stream."""

from pygeofence.models._base import ApiResponseModel, GeofenceBaseModel, GeofenceEnum, Timestamp, parse_timestamp
from pygeofence.models.alert import AlertEvent, EventType, GeofenceRef, VehicleRef, decode_alert_event
from pygeofence.models.alert_rule import AlertRule, AlertRuleCreate
from pygeofence.models.geo import ClosedRing, GeoPoint
from pygeofence.models.geofence import Geofence, GeofenceCategory, GeofenceCreate
from pygeofence.models.stats import DashboardStats
from pygeofence.models.vehicle import (
    CurrentGeofence,
    LocationUpdate,
    Vehicle,
    VehicleCreate,
    VehicleLocation,
    VehicleType,
)
from pygeofence.models.violation import Violation, ViolationPage, ViolationQuery

__all__ = [
    "AlertEvent",
    "AlertRule",
    "AlertRuleCreate",
    "ApiResponseModel",
    "ClosedRing",
    "CurrentGeofence",
    "DashboardStats",
    "EventType",
    "GeoPoint",
    "Geofence",
    "GeofenceBaseModel",
    "GeofenceCategory",
    "GeofenceCreate",
    "GeofenceEnum",
    "GeofenceRef",
    "LocationUpdate",
    "Timestamp",
    "Vehicle",
    "VehicleCreate",
    "VehicleLocation",
    "VehicleRef",
    "VehicleType",
    "Violation",
    "ViolationPage",
    "ViolationQuery",
    "decode_alert_event",
    "parse_timestamp",
]
