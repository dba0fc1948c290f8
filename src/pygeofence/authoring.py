"""Geofence authoring session: drawing mode, draft, and submission."""

from __future__ import annotations

import logging

from pygeofence.client import GeofenceClient
from pygeofence.exceptions import GeofenceApiError, GeofenceError, InsufficientVerticesError
from pygeofence.models.geo import GeoPoint
from pygeofence.models.geofence import Geofence, GeofenceCategory, GeofenceCreate
from pygeofence.notify import LoggingNotificationSink, NotificationSink
from pygeofence.polygon import PolygonBuilder

_logger = logging.getLogger(__name__)


class AuthoringSession:
    """One geofence creation form.

    Map clicks only add points while drawing mode is on.  The draft is
    cleared after a successful submission or on :meth:`cancel`; a failed
    submission leaves it intact so the user can retry.
    """

    def __init__(
        self,
        client: GeofenceClient,
        *,
        sink: NotificationSink | None = None,
        builder: PolygonBuilder | None = None,
    ) -> None:
        self._client = client
        self._sink: NotificationSink = sink if sink is not None else LoggingNotificationSink()
        self._builder = builder if builder is not None else PolygonBuilder()
        self._drawing = False

    @property
    def builder(self) -> PolygonBuilder:
        return self._builder

    @property
    def drawing(self) -> bool:
        return self._drawing

    @property
    def point_count(self) -> int:
        return len(self._builder)

    def toggle_drawing(self) -> bool:
        self._drawing = not self._drawing
        return self._drawing

    def handle_click(self, latitude: float, longitude: float) -> bool:
        """Record a map click; returns ``False`` when not in drawing mode."""
        if not self._drawing:
            return False
        self._builder.add_point(GeoPoint.of(latitude, longitude))
        return True

    def cancel(self) -> None:
        self._builder.reset()
        self._drawing = False

    async def submit(
        self,
        name: str,
        *,
        category: GeofenceCategory = GeofenceCategory.DELIVERY_ZONE,
        description: str = "",
    ) -> Geofence | None:
        """Close the drawn ring and create the geofence.

        Raises
        ------
        InsufficientVerticesError
            Fewer than four points drawn; nothing was sent.
        GeofenceSubmissionError
            The backend rejected the geofence; the draft is kept.
        GeofenceTransportError
            The request did not reach the backend; the draft is kept.
        """
        try:
            ring = self._builder.close()
        except InsufficientVerticesError:
            self._sink.notify("Please draw at least 3 points on the map (polygon will auto-close)")
            raise

        request = GeofenceCreate(name=name, category=category, ring=ring, description=description)
        try:
            created = await self._client.create_geofence(request)
        except GeofenceError as exc:
            detail = exc.detail if isinstance(exc, GeofenceApiError) else ""
            self._sink.notify(detail or "Failed to create geofence")
            raise

        _logger.debug("Geofence %r created with %d vertices", name, ring.vertex_count)
        self._builder.reset()
        self._drawing = False
        self._sink.notify("Geofence created successfully")
        return created
