"""Custom exception hierarchy for pygeofence."""

from __future__ import annotations


class GeofenceError(Exception):
    """Base exception for all pygeofence errors."""


class GeofenceConfigError(GeofenceError):
    """Invalid or missing configuration."""


class GeofenceTransportError(GeofenceError):
    """Network-level failure (connection refused, dropped socket, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class GeofenceDecodeError(GeofenceError):
    """An alert-stream message could not be decoded into an ``AlertEvent``."""


class InsufficientVerticesError(GeofenceError):
    """A polygon draft has too few points to form a closed ring.

    A ring needs at least three authored vertices plus the repeated
    closing point.  The draft is left untouched; callers should add more
    points before trying again.
    """

    def __init__(self, point_count: int, *, required: int) -> None:
        self.point_count = point_count
        self.required = required
        super().__init__(
            f"Polygon needs at least {required} points (3 vertices plus closing point), got {point_count}"
        )


class GeofenceApiError(GeofenceError):
    """Backend replied with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        detail: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(message)


class GeofenceSubmissionError(GeofenceApiError):
    """Backend rejected a submitted payload (geofence, vehicle, alert rule...).

    Local draft and feed state are not touched, so the submission can be
    retried as-is.
    """
