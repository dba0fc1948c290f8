"""High-level async client for the geofencing backend."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pygeofence._api import alerts as _alerts_api
from pygeofence._api import geofences as _geofences_api
from pygeofence._api import vehicles as _vehicles_api
from pygeofence._api import violations as _violations_api
from pygeofence._constants import USER_AGENT
from pygeofence._transport import HttpTransport, Transport
from pygeofence.config import GeofenceConfig
from pygeofence.exceptions import GeofenceError
from pygeofence.models.alert_rule import AlertRule, AlertRuleCreate
from pygeofence.models.geofence import Geofence, GeofenceCategory, GeofenceCreate
from pygeofence.models.stats import DashboardStats
from pygeofence.models.vehicle import LocationUpdate, Vehicle, VehicleCreate, VehicleLocation
from pygeofence.models.violation import ViolationPage, ViolationQuery
from pygeofence.stream import AiohttpConnector, AlertStream, ConnectionState, RetryScheduler

_logger = logging.getLogger(__name__)


class GeofenceClient:
    """Async client for the geofencing REST API and alert stream.

    Usage::

        async with GeofenceClient(config) as client:
            vehicles = await client.list_vehicles()
            stream = client.alert_stream()
    """

    def __init__(
        self,
        config: GeofenceConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or GeofenceConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None

    @property
    def config(self) -> GeofenceConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GeofenceClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(headers={"user-agent": USER_AGENT})
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise GeofenceError("Client not initialized. Use 'async with GeofenceClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Geofences
    # ------------------------------------------------------------------

    async def list_geofences(self, category: GeofenceCategory | None = None) -> list[Geofence]:
        """Fetch geofences, optionally filtered by category."""
        return await _geofences_api.fetch_geofences(self._require_transport(), category=category)

    async def create_geofence(self, request: GeofenceCreate) -> Geofence | None:
        """Submit a geofence whose boundary is a closed ring.

        Raises
        ------
        GeofenceSubmissionError
            When the backend rejects the geofence.
        """
        return await _geofences_api.create_geofence(self._require_transport(), request)

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def list_vehicles(self) -> list[Vehicle]:
        return await _vehicles_api.fetch_vehicles(self._require_transport())

    async def register_vehicle(self, request: VehicleCreate) -> Vehicle | None:
        return await _vehicles_api.register_vehicle(self._require_transport(), request)

    async def get_vehicle_location(self, vehicle_id: str) -> VehicleLocation:
        return await _vehicles_api.fetch_vehicle_location(self._require_transport(), vehicle_id)

    async def update_vehicle_location(self, update: LocationUpdate) -> VehicleLocation:
        """Report a position; the reply lists the geofences the vehicle is now inside."""
        return await _vehicles_api.update_vehicle_location(self._require_transport(), update)

    # ------------------------------------------------------------------
    # Alerts and violations
    # ------------------------------------------------------------------

    async def list_alert_rules(
        self,
        *,
        geofence_id: str | None = None,
        vehicle_id: str | None = None,
    ) -> list[AlertRule]:
        return await _alerts_api.fetch_alert_rules(
            self._require_transport(),
            geofence_id=geofence_id,
            vehicle_id=vehicle_id,
        )

    async def configure_alert(self, request: AlertRuleCreate) -> AlertRule | None:
        return await _alerts_api.configure_alert(self._require_transport(), request)

    async def get_violation_history(self, query: ViolationQuery | None = None) -> ViolationPage:
        return await _violations_api.fetch_violation_history(self._require_transport(), query or ViolationQuery())

    async def get_dashboard_stats(self) -> DashboardStats:
        """Fetch the dashboard counters concurrently."""
        transport = self._require_transport()
        geofences, vehicles, rules, violations = await asyncio.gather(
            _geofences_api.fetch_geofences(transport),
            _vehicles_api.fetch_vehicles(transport),
            _alerts_api.fetch_alert_rules(transport),
            _violations_api.fetch_violation_history(transport, ViolationQuery(limit=1)),
        )
        return DashboardStats(
            geofences=len(geofences),
            vehicles=len(vehicles),
            active_alerts=len(rules),
            violations=violations.total_count,
        )

    # ------------------------------------------------------------------
    # Alert stream
    # ------------------------------------------------------------------

    def alert_stream(
        self,
        *,
        scheduler: RetryScheduler | None = None,
        on_state_change: Callable[[ConnectionState], None] | None = None,
    ) -> AlertStream:
        """Build an :class:`AlertStream` configured from this client.

        When the client owns an HTTP session the stream reuses it, so the
        stream must be closed before the client exits.
        """
        connector = AiohttpConnector(self._http_session, heartbeat=self._config.ws_heartbeat)
        _logger.debug("Building alert stream url=%s", self._config.ws_url)
        return AlertStream(
            self._config.ws_url,
            connector=connector,
            scheduler=scheduler,
            reconnect_delay=self._config.reconnect_delay,
            max_reconnect_attempts=self._config.max_reconnect_attempts,
            on_state_change=on_state_change,
        )
