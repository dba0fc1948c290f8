"""Base model and enum for geofencing API payloads.

Every pygeofence model inherits from :class:`GeofenceBaseModel`, which is
frozen (values are never mutated after creation), ignores unknown keys
and coerces numeric IDs to strings.

Response models inherit from :class:`ApiResponseModel`, which also
stashes the original payload in ``raw``.

Category-like enums inherit from :class:`GeofenceEnum`, which resolves
unmapped values to an ``UNKNOWN`` member instead of raising.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> Any:
    """Normalize an ISO-8601 string or epoch number (seconds **or** ms) to a UTC datetime.

    Strings are handed to pydantic for ISO-8601 parsing; naive results are
    assumed to be UTC.  Unsupported values are returned unchanged so
    pydantic reports the validation error.  Epoch numbers outside the
    representable range raise ``ValueError``.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        try:
            ts = float(value)
            if ts >= _MS_THRESHOLD:
                ts = ts / 1000
            return datetime.fromtimestamp(ts, tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"epoch timestamp out of range: {value!r}") from exc
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return value
        return ensure_utc(parsed)
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that accepts ISO-8601 strings or epoch numbers and yields aware datetimes."""


class GeofenceEnum(StrEnum):
    """Base for backend string enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.  Values the
    backend sends that have no mapped member resolve to ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> GeofenceEnum | None:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        unknown = cls._value2member_map_.get("unknown")
        return unknown if isinstance(unknown, cls) else None


class GeofenceBaseModel(BaseModel):
    """Base for every pygeofence value object."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )


class ApiResponseModel(GeofenceBaseModel):
    """Base for REST response models; keeps the original payload in ``raw``."""

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        # Only auto-stash raw when validating an API dict.  When constructing
        # with kwargs that include raw=, keep the caller's value.
        if "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = dict(values)
        return merged
