"""Interactive polygon authoring: map clicks to a closed ring."""

from __future__ import annotations

import logging

from pygeofence._constants import MIN_RING_POINTS
from pygeofence.exceptions import InsufficientVerticesError
from pygeofence.models.geo import ClosedRing, GeoPoint

_logger = logging.getLogger(__name__)


class PolygonBuilder:
    """Accumulates drawn points and closes them into a :class:`ClosedRing`.

    The builder is purely structural: it does not deduplicate points and
    does not check self-intersection, area or winding order.

    Usage::

        builder = PolygonBuilder()
        for lat, lng in clicks:
            builder.add_point(GeoPoint.of(lat, lng))
        ring = builder.close()
    """

    def __init__(self) -> None:
        self._points: list[GeoPoint] = []

    @property
    def points(self) -> tuple[GeoPoint, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def add_point(self, point: GeoPoint) -> int:
        """Append *point* unconditionally and return the new point count."""
        self._points.append(point)
        return len(self._points)

    def close(self) -> ClosedRing:
        """Return the draft as a closed ring.

        The first and last points are compared by exact coordinate
        equality; when they differ a copy of the first point is appended
        to the returned ring.  The draft itself is left as is.

        Raises
        ------
        InsufficientVerticesError
            When the draft holds fewer than four points.
        """
        count = len(self._points)
        if count < MIN_RING_POINTS:
            raise InsufficientVerticesError(count, required=MIN_RING_POINTS)

        points = list(self._points)
        first, last = points[0], points[-1]
        if (first.latitude, first.longitude) != (last.latitude, last.longitude):
            points.append(first.model_copy())
        else:
            _logger.debug("Polygon draft already closed (%d points)", count)
        return ClosedRing(points=tuple(points))

    def reset(self) -> None:
        """Discard every point."""
        self._points.clear()
