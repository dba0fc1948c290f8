"""HTTP transport for the geofencing REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pygeofence._constants import USER_AGENT
from pygeofence._redact import redact_for_log
from pygeofence.config import GeofenceConfig
from pygeofence.exceptions import GeofenceApiError, GeofenceSubmissionError, GeofenceTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the client.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any: ...


def _error_detail(text: str) -> str:
    """Extract a readable message from an error body (JSON or plain text)."""
    stripped = text.strip()
    try:
        body = json.loads(stripped)
    except json.JSONDecodeError:
        return stripped
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(body, str):
        return body
    return stripped


class HttpTransport:
    """JSON-over-HTTP transport bound to ``config.base_url``."""

    def __init__(self, config: GeofenceConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Non-2xx replies raise :class:`GeofenceApiError`, or
        :class:`GeofenceSubmissionError` for write requests.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("%s %s params=%s body=%s", method, url, params, redact_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                json=dict(payload) if payload is not None else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise GeofenceTransportError(
                f"{method} {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise GeofenceTransportError(
                f"{method} {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        if not 200 <= status < 300:
            detail = _error_detail(text)
            error_cls = GeofenceApiError if method.upper() == "GET" else GeofenceSubmissionError
            raise error_cls(
                f"HTTP {status} from {method} {endpoint}: {detail[:200]}",
                status_code=status,
                endpoint=endpoint,
                detail=detail,
            )

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise GeofenceTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
