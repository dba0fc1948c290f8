from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pygeofence.authoring import AuthoringSession
from pygeofence.client import GeofenceClient
from pygeofence.config import GeofenceConfig
from pygeofence.exceptions import (
    GeofenceApiError,
    GeofenceError,
    GeofenceSubmissionError,
    GeofenceTransportError,
    InsufficientVerticesError,
)
from pygeofence.models.alert import EventType
from pygeofence.models.alert_rule import AlertRuleCreate
from pygeofence.models.geo import GeoPoint
from pygeofence.models.geofence import GeofenceCategory
from pygeofence.models.vehicle import LocationUpdate, VehicleCreate
from pygeofence.models.violation import ViolationQuery
from pygeofence.monitor import AlertMonitor
from pygeofence.stream import ConnectionState


@dataclass
class FakeGeofenceBackend:
    geofences: list[dict[str, Any]] = field(default_factory=list)
    vehicles: list[dict[str, Any]] = field(default_factory=list)
    alerts: list[dict[str, Any]] = field(default_factory=list)
    violations: list[dict[str, Any]] = field(default_factory=list)
    requests: list[tuple[str, str, dict[str, str] | None, dict[str, Any] | None]] = field(default_factory=list)
    reject_geofence: str | None = None
    geofence_unreachable: bool = False

    def calls(self, method: str, endpoint: str) -> list[Any]:
        return [r for r in self.requests if r[0] == method and r[1] == endpoint]

    async def request_json(
        self,
        method: str,
        endpoint: str,
        params: Mapping[str, str] | None,
        payload: Mapping[str, Any] | None,
    ) -> Any:
        self.requests.append(
            (method, endpoint, dict(params) if params else None, copy.deepcopy(dict(payload)) if payload else None)
        )

        if (method, endpoint) == ("GET", "/geofences"):
            category = (params or {}).get("category")
            items = [g for g in self.geofences if category is None or g["category"] == category]
            return {"geofences": items}

        if (method, endpoint) == ("POST", "/geofences"):
            if self.geofence_unreachable:
                raise GeofenceTransportError(f"{method} {endpoint} failed: connection refused", endpoint=endpoint)
            if self.reject_geofence is not None:
                raise GeofenceSubmissionError(
                    f"HTTP 400 from POST /geofences: {self.reject_geofence}",
                    status_code=400,
                    endpoint=endpoint,
                    detail=self.reject_geofence,
                )
            assert payload is not None
            stored = {"id": len(self.geofences) + 1, **payload}
            self.geofences.append(stored)
            return {"message": "Geofence created successfully", "geofence": stored}

        if (method, endpoint) == ("GET", "/vehicles"):
            return {"vehicles": self.vehicles}

        if (method, endpoint) == ("POST", "/vehicles"):
            assert payload is not None
            stored = {"id": f"V{len(self.vehicles) + 1}", **payload}
            self.vehicles.append(stored)
            return {"vehicle": stored}

        if (method, endpoint) == ("POST", "/vehicles/location"):
            assert payload is not None
            return {
                "current_location": {"latitude": payload["latitude"], "longitude": payload["longitude"]},
                "current_geofences": [{"id": 1, "geofence_name": "Central Depot", "category": "delivery_zone"}],
            }

        if method == "GET" and endpoint.startswith("/vehicles/location/"):
            return {"vehicle_id": endpoint.rsplit("/", 1)[-1], "current_location": None, "current_geofences": None}

        if (method, endpoint) == ("GET", "/alerts"):
            return {"alerts": self.alerts}

        if (method, endpoint) == ("POST", "/alerts/configure"):
            assert payload is not None
            stored = {"alert_id": len(self.alerts) + 1, "status": "active", **payload}
            self.alerts.append(stored)
            return {"alert_id": stored["alert_id"], "alert": stored}

        if (method, endpoint) == ("GET", "/violations/history"):
            limit = int((params or {}).get("limit", "50"))
            return {"violations": self.violations[:limit], "total_count": len(self.violations)}

        raise GeofenceApiError(f"HTTP 404 from {method} {endpoint}", status_code=404, endpoint=endpoint)


@dataclass
class RecordingSink:
    notices: list[tuple[str, EventType | None]] = field(default_factory=list)

    def notify(self, message: str, event_type: EventType | None = None) -> None:
        self.notices.append((message, event_type))


@pytest.fixture
def config() -> GeofenceConfig:
    return GeofenceConfig(base_url="http://fleet.test", ws_url="ws://fleet.test/ws/alerts")


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeGeofenceBackend:
    fake_backend = FakeGeofenceBackend(
        violations=[
            {"id": n, "vehicle_id": "V1", "geofence_id": 1, "event_type": "entry", "timestamp": 1767254400 + n}
            for n in range(7)
        ]
    )

    async def fake_request_json(
        _self: Any,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        return await fake_backend.request_json(method, endpoint, params, payload)

    monkeypatch.setattr("pygeofence._transport.HttpTransport.request_json", fake_request_json)
    return fake_backend


def _draw(session: AuthoringSession, *points: tuple[float, float]) -> None:
    for lat, lng in points:
        session.handle_click(lat, lng)


_SQUARE = ((12.97, 77.59), (12.98, 77.59), (12.98, 77.60), (12.97, 77.60))


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_client_rest_round_trip(config: GeofenceConfig, backend: FakeGeofenceBackend) -> None:
    async with GeofenceClient(config) as client:
        vehicle = await client.register_vehicle(
            VehicleCreate(vehicle_number="KA-01-AB-1234", driver_name="Asha", phone="98450")
        )
        assert vehicle is not None
        assert vehicle.id == "V1"

        session = AuthoringSession(client, sink=RecordingSink())
        session.toggle_drawing()
        _draw(session, *_SQUARE)
        geofence = await session.submit("Central Depot", category=GeofenceCategory.DELIVERY_ZONE)
        assert geofence is not None
        assert geofence.id == "1"
        assert len(geofence.coordinates) == 5

        rule = await client.configure_alert(AlertRuleCreate(geofence_id=geofence.id, event_type=EventType.EXIT))
        assert rule is not None
        assert rule.applies_to_all_vehicles is True

        location = await client.update_vehicle_location(
            LocationUpdate(vehicle_id=vehicle.id, position=GeoPoint.of(12.975, 77.595))
        )
        assert location.vehicle_id == "V1"
        assert location.current_geofences[0].geofence_name == "Central Depot"

        current = await client.get_vehicle_location("V 1")
        assert current.vehicle_id == "V%201"
        assert current.is_inside_any is False

        stats = await client.get_dashboard_stats()
        assert stats.geofences == 1
        assert stats.vehicles == 1
        assert stats.active_alerts == 1
        assert stats.violations == 7

        page = await client.get_violation_history(ViolationQuery(vehicle_id="V1", limit=3))
        assert len(page.violations) == 3
        assert page.total_count == 7

        toll = await client.list_geofences(GeofenceCategory.TOLL_ZONE)
        assert toll == []

    assert backend.calls("GET", "/vehicles/location/V%201")
    assert backend.calls("GET", "/violations/history")[-1][2] == {"vehicle_id": "V1", "limit": "3"}
    assert backend.calls("GET", "/geofences")[-1][2] == {"category": "toll_zone"}


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_submit_sends_closed_ring_and_resets_draft(
    config: GeofenceConfig, backend: FakeGeofenceBackend
) -> None:
    sink = RecordingSink()
    async with GeofenceClient(config) as client:
        session = AuthoringSession(client, sink=sink)
        assert session.handle_click(1.0, 1.0) is False

        session.toggle_drawing()
        _draw(session, *_SQUARE)
        await session.submit("Yard", category=GeofenceCategory.RESTRICTED_ZONE, description="night parking")

    (_, _, _, payload) = backend.calls("POST", "/geofences")[0]
    assert payload == {
        "name": "Yard",
        "description": "night parking",
        "category": "restricted_zone",
        "coordinates": [list(p) for p in _SQUARE] + [list(_SQUARE[0])],
    }
    assert session.point_count == 0
    assert session.drawing is False
    assert sink.notices == [("Geofence created successfully", None)]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_too_few_points_sends_nothing(config: GeofenceConfig, backend: FakeGeofenceBackend) -> None:
    sink = RecordingSink()
    async with GeofenceClient(config) as client:
        session = AuthoringSession(client, sink=sink)
        session.toggle_drawing()
        _draw(session, *_SQUARE[:3])

        with pytest.raises(InsufficientVerticesError):
            await session.submit("Yard")

    assert backend.calls("POST", "/geofences") == []
    assert session.point_count == 3
    assert sink.notices == [("Please draw at least 3 points on the map (polygon will auto-close)", None)]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_rejected_submission_keeps_draft(config: GeofenceConfig, backend: FakeGeofenceBackend) -> None:
    backend.reject_geofence = "Geofence name already exists"
    sink = RecordingSink()
    async with GeofenceClient(config) as client:
        session = AuthoringSession(client, sink=sink)
        session.toggle_drawing()
        _draw(session, *_SQUARE)

        with pytest.raises(GeofenceSubmissionError) as excinfo:
            await session.submit("Yard")

        assert excinfo.value.status_code == 400
        assert session.point_count == 4
        assert session.drawing is True
        assert sink.notices == [("Geofence name already exists", None)]

        backend.reject_geofence = None
        created = await session.submit("Yard")

    assert created is not None
    assert len(backend.calls("POST", "/geofences")) == 2
    assert session.point_count == 0


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_unreachable_backend_notifies_and_keeps_draft(
    config: GeofenceConfig, backend: FakeGeofenceBackend
) -> None:
    backend.geofence_unreachable = True
    sink = RecordingSink()
    async with GeofenceClient(config) as client:
        session = AuthoringSession(client, sink=sink)
        session.toggle_drawing()
        _draw(session, *_SQUARE)

        with pytest.raises(GeofenceTransportError):
            await session.submit("Yard")

    assert sink.notices == [("Failed to create geofence", None)]
    assert session.point_count == 4
    assert session.drawing is True


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_cancel_discards_draft(config: GeofenceConfig, backend: FakeGeofenceBackend) -> None:
    async with GeofenceClient(config) as client:
        session = AuthoringSession(client, sink=RecordingSink())
        session.toggle_drawing()
        _draw(session, *_SQUARE)
        session.cancel()

    assert session.point_count == 0
    assert session.drawing is False
    assert backend.requests == []


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_client_requires_context_manager(config: GeofenceConfig) -> None:
    client = GeofenceClient(config)

    with pytest.raises(GeofenceError, match="not initialized"):
        await client.list_vehicles()


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_alert_stream_from_client(
    config: GeofenceConfig,
    monkeypatch: pytest.MonkeyPatch,
    scheduler,
    settle,
    alert_payload,
    fake_socket_cls,
) -> None:
    sockets: list[Any] = []
    urls: list[str] = []

    async def fake_connect(_self: Any, url: str) -> Any:
        urls.append(url)
        socket = fake_socket_cls()
        sockets.append(socket)
        return socket

    monkeypatch.setattr("pygeofence.stream.AiohttpConnector.connect", fake_connect)
    sink = RecordingSink()
    states: list[ConnectionState] = []

    async with GeofenceClient(config) as client:
        stream = client.alert_stream(scheduler=scheduler, on_state_change=states.append)
        async with AlertMonitor(stream, sink=sink) as monitor:
            await settle()
            sockets[0].push_text(alert_payload("entry"))
            await settle()
            assert monitor.feed.state.latest is not None

    assert urls == ["ws://fleet.test/ws/alerts"]
    assert sink.notices == [("KA-01-AB-1234 entered Central Depot", EventType.ENTRY)]
    assert states == [ConnectionState.CONNECTING, ConnectionState.OPEN, ConnectionState.CLOSED]
    assert sockets[0].close_calls == 1
