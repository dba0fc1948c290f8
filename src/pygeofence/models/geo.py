"""Geographic point and closed-ring models."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import AliasChoices, Field, model_validator

from pygeofence._constants import MIN_RING_POINTS
from pygeofence.models._base import GeofenceBaseModel


class GeoPoint(GeofenceBaseModel):
    """A (latitude, longitude) pair in degrees.

    Accepts keyword construction, a mapping with ``lat``/``lng`` style
    keys, or a ``[lat, lng]`` pair as sent in ``coordinates`` arrays.
    Both values must be finite and within range.
    """

    latitude: float = Field(
        ge=-90.0,
        le=90.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("latitude", "lat"),
    )
    longitude: float = Field(
        ge=-180.0,
        le=180.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("longitude", "lng", "lon"),
    )

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, values: Any) -> Any:
        if isinstance(values, Mapping) or isinstance(values, (str, bytes)):
            return values
        if isinstance(values, Sequence):
            if len(values) != 2:
                raise ValueError(f"coordinate pair must have 2 items, got {len(values)}")
            return {"latitude": values[0], "longitude": values[1]}
        return values

    @classmethod
    def of(cls, latitude: float, longitude: float) -> GeoPoint:
        """Shorthand constructor."""
        return cls(latitude=latitude, longitude=longitude)

    def as_pair(self) -> list[float]:
        """Return ``[lat, lng]`` as used by the backend ``coordinates`` arrays."""
        return [self.latitude, self.longitude]


class ClosedRing(GeofenceBaseModel):
    """A polygon boundary whose first and last points are identical.

    Holds at least four points: three vertices plus the repeated closing
    point.  No geometric validation (self-intersection, area, winding) is
    performed; the backend decides whether a ring is acceptable.
    """

    points: tuple[GeoPoint, ...]

    @model_validator(mode="after")
    def _check_closed(self) -> ClosedRing:
        if len(self.points) < MIN_RING_POINTS:
            raise ValueError(f"a closed ring needs at least {MIN_RING_POINTS} points, got {len(self.points)}")
        if self.points[0] != self.points[-1]:
            raise ValueError("first and last points of a closed ring must be identical")
        return self

    def __len__(self) -> int:
        return len(self.points)

    @property
    def vertex_count(self) -> int:
        """Number of authored points, excluding the closing point."""
        return len(self.points) - 1

    def coordinates(self) -> list[list[float]]:
        """Return the ring as ``[[lat, lng], ...]`` for ``POST /geofences``."""
        return [point.as_pair() for point in self.points]
