"""pygeofence - Async Python client for a vehicle-geofencing backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygeofence")
except PackageNotFoundError:
    __version__ = "0+local"
from pygeofence.authoring import AuthoringSession
from pygeofence.client import GeofenceClient
from pygeofence.config import GeofenceConfig
from pygeofence.exceptions import (
    GeofenceApiError,
    GeofenceConfigError,
    GeofenceDecodeError,
    GeofenceError,
    GeofenceSubmissionError,
    GeofenceTransportError,
    InsufficientVerticesError,
)
from pygeofence.feed import AlertFeed, AlertFeedState
from pygeofence.models import (
    AlertEvent,
    AlertRule,
    AlertRuleCreate,
    ClosedRing,
    DashboardStats,
    EventType,
    GeoPoint,
    Geofence,
    GeofenceCategory,
    GeofenceCreate,
    GeofenceRef,
    LocationUpdate,
    Vehicle,
    VehicleCreate,
    VehicleLocation,
    VehicleRef,
    VehicleType,
    Violation,
    ViolationPage,
    ViolationQuery,
)
from pygeofence.monitor import AlertMonitor
from pygeofence.notify import LoggingNotificationSink, NotificationSink
from pygeofence.polygon import PolygonBuilder
from pygeofence.stream import AiohttpConnector, AlertStream, ConnectionState, Subscription

__all__ = [
    "__version__",
    "AiohttpConnector",
    "AlertEvent",
    "AlertFeed",
    "AlertFeedState",
    "AlertMonitor",
    "AlertRule",
    "AlertRuleCreate",
    "AlertStream",
    "AuthoringSession",
    "ClosedRing",
    "ConnectionState",
    "DashboardStats",
    "EventType",
    "GeoPoint",
    "Geofence",
    "GeofenceApiError",
    "GeofenceCategory",
    "GeofenceClient",
    "GeofenceConfig",
    "GeofenceConfigError",
    "GeofenceCreate",
    "GeofenceDecodeError",
    "GeofenceError",
    "GeofenceRef",
    "GeofenceSubmissionError",
    "GeofenceTransportError",
    "InsufficientVerticesError",
    "LocationUpdate",
    "LoggingNotificationSink",
    "NotificationSink",
    "PolygonBuilder",
    "Subscription",
    "Vehicle",
    "VehicleCreate",
    "VehicleLocation",
    "VehicleRef",
    "VehicleType",
    "Violation",
    "ViolationPage",
    "ViolationQuery",
]
