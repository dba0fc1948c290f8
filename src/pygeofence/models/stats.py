"""Dashboard summary model."""

from __future__ import annotations

from pygeofence.models._base import GeofenceBaseModel


class DashboardStats(GeofenceBaseModel):
    """Counts shown on the dashboard landing page."""

    geofences: int = 0
    vehicles: int = 0
    active_alerts: int = 0
    violations: int = 0
