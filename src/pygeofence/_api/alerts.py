"""Alert rule endpoints."""

from __future__ import annotations

from pygeofence._api._common import extract_list, extract_object
from pygeofence._transport import Transport
from pygeofence.models.alert_rule import AlertRule, AlertRuleCreate

_ALERTS = "/alerts"
_CONFIGURE = "/alerts/configure"


async def fetch_alert_rules(
    transport: Transport,
    *,
    geofence_id: str | None = None,
    vehicle_id: str | None = None,
) -> list[AlertRule]:
    params: dict[str, str] = {}
    if geofence_id:
        params["geofence_id"] = geofence_id
    if vehicle_id:
        params["vehicle_id"] = vehicle_id
    body = await transport.request_json("GET", _ALERTS, params=params or None)
    return [AlertRule.model_validate(item) for item in extract_list(body, "alerts", endpoint=_ALERTS)]


async def configure_alert(transport: Transport, request: AlertRuleCreate) -> AlertRule | None:
    body = await transport.request_json("POST", _CONFIGURE, payload=request.to_payload())
    created = extract_object(body, "alert")
    if "alert_id" not in created:
        return None
    return AlertRule.model_validate(created)
