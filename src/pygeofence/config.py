"""Client configuration for pygeofence."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pygeofence._constants import BASE_URL, FEED_CAPACITY, RECONNECT_DELAY_SECONDS, WS_URL
from pygeofence.exceptions import GeofenceConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise GeofenceConfigError(f"{key} must be a number, got {value!r}") from exc


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise GeofenceConfigError(f"{key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class GeofenceConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        REST API base URL.  Defaults to ``http://localhost:8080``.
    ws_url : str
        Alert stream websocket endpoint.
    reconnect_delay : float
        Seconds between a lost alert-stream connection and the next
        attempt.  Constant, no exponential backoff.
    max_reconnect_attempts : int or None
        Consecutive failed attempts after which the alert stream gives
        up.  ``None`` (the default) retries forever.
    feed_capacity : int
        Maximum number of alerts kept in the live feed.
    request_timeout : float
        Total timeout in seconds for a single REST request.
    ws_heartbeat : float or None
        Websocket ping interval in seconds.  ``None`` disables pings.
    """

    base_url: str = BASE_URL
    ws_url: str = WS_URL
    reconnect_delay: float = RECONNECT_DELAY_SECONDS
    max_reconnect_attempts: int | None = None
    feed_capacity: int = FEED_CAPACITY
    request_timeout: float = 30.0
    ws_heartbeat: float | None = 30.0

    def __post_init__(self) -> None:
        if self.reconnect_delay < 0:
            raise GeofenceConfigError("reconnect_delay must be >= 0")
        if self.max_reconnect_attempts is not None and self.max_reconnect_attempts < 0:
            raise GeofenceConfigError("max_reconnect_attempts must be >= 0 or None")
        if self.feed_capacity < 1:
            raise GeofenceConfigError("feed_capacity must be >= 1")
        if self.request_timeout <= 0:
            raise GeofenceConfigError("request_timeout must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> GeofenceConfig:
        """Create configuration from environment variables.

        Reads ``GEOFENCE_API_URL``, ``GEOFENCE_WS_URL`` and the optional
        numeric ``GEOFENCE_*`` tuning variables.  Explicit keyword
        arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "GEOFENCE_API_URL": "base_url",
            "GEOFENCE_WS_URL": "ws_url",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val.rstrip("/") if field_name == "base_url" else val

        delay = _env_float(env, "GEOFENCE_RECONNECT_DELAY")
        if delay is not None:
            config_kwargs["reconnect_delay"] = delay

        # "0" is a valid bound (never retry); an empty value means unlimited.
        attempts = _env_int(env, "GEOFENCE_MAX_RECONNECT_ATTEMPTS")
        if attempts is not None:
            config_kwargs["max_reconnect_attempts"] = attempts

        capacity = _env_int(env, "GEOFENCE_FEED_CAPACITY")
        if capacity is not None:
            config_kwargs["feed_capacity"] = capacity

        timeout = _env_float(env, "GEOFENCE_REQUEST_TIMEOUT")
        if timeout is not None:
            config_kwargs["request_timeout"] = timeout

        heartbeat = _env_float(env, "GEOFENCE_WS_HEARTBEAT")
        if heartbeat is not None:
            config_kwargs["ws_heartbeat"] = heartbeat if heartbeat > 0 else None

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
