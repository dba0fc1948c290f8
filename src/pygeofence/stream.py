"""Self-healing websocket alert stream.

``AlertStream`` owns one logical connection to the server's alert
endpoint and delivers decoded :class:`AlertEvent` values to a single
subscriber.  Any close or error, clean or not, arms one fixed-delay retry
timer; teardown cancels the timer and closes the socket without ever
re-entering the retry path.

State machine::

    connecting --handshake--> open --close/error--> closed
        ^                                             |
        +------------ reconnecting <--retry timer-----+
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable
from enum import StrEnum
from typing import Any, Protocol

import aiohttp

from pygeofence._constants import RECONNECT_DELAY_SECONDS, USER_AGENT, WS_URL
from pygeofence._redact import redact_payload_for_log
from pygeofence.exceptions import GeofenceDecodeError, GeofenceError
from pygeofence.models.alert import AlertEvent, decode_alert_event

AlertCallback = Callable[[AlertEvent], None]


class ConnectionState(StrEnum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    RECONNECTING = "reconnecting"


class WebSocketConnection(Protocol):
    """The subset of ``aiohttp.ClientWebSocketResponse`` the stream relies on."""

    @property
    def closed(self) -> bool: ...

    async def close(self) -> Any: ...

    def __aiter__(self) -> AsyncIterator[Any]: ...


class WebSocketConnector(Protocol):
    """Opens websocket connections; lets tests substitute a fake server."""

    async def connect(self, url: str) -> WebSocketConnection: ...


class RetryHandle(Protocol):
    def cancel(self) -> None: ...


class RetryScheduler(Protocol):
    """Schedules the reconnect timer.

    ``asyncio.AbstractEventLoop`` satisfies this protocol and is the
    default.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> RetryHandle: ...


class AiohttpConnector:
    """Default connector backed by ``aiohttp.ClientSession.ws_connect``.

    When no session is supplied one is created on first use and closed by
    :meth:`aclose`.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        heartbeat: float | None = 30.0,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._heartbeat = heartbeat

    async def connect(self, url: str) -> WebSocketConnection:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"user-agent": USER_AGENT})
            self._owns_session = True
        return await self._session.ws_connect(url, heartbeat=self._heartbeat)

    async def aclose(self) -> None:
        session = self._session
        if self._owns_session and session is not None:
            self._session = None
            await session.close()


class Subscription:
    """Handle returned by :meth:`AlertStream.subscribe`.

    ``unsubscribe`` is idempotent.  The handle is also an async context
    manager that unsubscribes on exit.
    """

    def __init__(self, stream: AlertStream) -> None:
        self._stream = stream
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    async def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        await self._stream._teardown(self)  # noqa: SLF001

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.unsubscribe()


class AlertStream:
    """Persistent alert-stream connection with fixed-delay reconnects.

    Usage::

        stream = AlertStream("ws://localhost:8080/ws/alerts")
        async with stream.subscribe(feed.record):
            ...

    Parameters
    ----------
    url : str
        Websocket endpoint.
    connector : WebSocketConnector or None
        Opens connections.  Defaults to :class:`AiohttpConnector`.
    scheduler : RetryScheduler or None
        Arms reconnect timers.  Defaults to the running event loop.
    reconnect_delay : float
        Seconds between a lost connection and the next attempt.
    max_reconnect_attempts : int or None
        Consecutive failed attempts before giving up.  ``None`` retries
        for as long as there is a subscriber.
    on_state_change : callable or None
        Called with every :class:`ConnectionState` change.
    logger : logging.Logger or None
        Logger to use instead of the module logger.
    """

    def __init__(
        self,
        url: str = WS_URL,
        *,
        connector: WebSocketConnector | None = None,
        scheduler: RetryScheduler | None = None,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
        max_reconnect_attempts: int | None = None,
        on_state_change: Callable[[ConnectionState], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = url
        self._connector: WebSocketConnector = connector if connector is not None else AiohttpConnector()
        self._scheduler = scheduler
        self._reconnect_delay = reconnect_delay
        self._max_reconnect_attempts = max_reconnect_attempts
        self._on_state_change = on_state_change
        self._logger = logger or logging.getLogger(__name__)

        self._state = ConnectionState.CLOSED
        self._loop: asyncio.AbstractEventLoop | None = None
        self._subscription: Subscription | None = None
        self._consumer: AlertCallback | None = None
        self._task: asyncio.Task[None] | None = None
        self._ws: WebSocketConnection | None = None
        self._retry_handle: RetryHandle | None = None
        self._retries = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None

    @property
    def retry_pending(self) -> bool:
        """Whether a reconnect timer is currently armed."""
        return self._retry_handle is not None

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    def subscribe(self, callback: AlertCallback) -> Subscription:
        """Register the single consumer and start connecting.

        Must be called from a running event loop.

        Raises
        ------
        GeofenceError
            If another subscription is still active.
        """
        if self._subscription is not None:
            raise GeofenceError("AlertStream already has an active subscriber")
        self._loop = asyncio.get_running_loop()
        self._consumer = callback
        self._retries = 0
        subscription = Subscription(self)
        self._subscription = subscription
        self._logger.debug("Alert stream subscribed url=%s", self._url)
        self._start_connection()
        return subscription

    async def close(self) -> None:
        """Tear down the active subscription, if any."""
        subscription = self._subscription
        if subscription is not None:
            await subscription.unsubscribe()

    async def _teardown(self, subscription: Subscription) -> None:
        if self._subscription is not subscription:
            return
        self._subscription = None
        self._consumer = None
        self._cancel_retry()

        task = self._task
        self._task = None
        ws = self._ws
        self._ws = None

        if ws is not None and not ws.closed:
            self._logger.debug("Alert stream closing connection")
            try:
                await ws.close()
            except Exception:
                self._logger.debug("Alert stream close failed", exc_info=True)
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self._subscription is not None:
            # Resubscribed while closing; the new connection owns state and session.
            return
        self._set_state(ConnectionState.CLOSED)
        if isinstance(self._connector, AiohttpConnector):
            await self._connector.aclose()
        self._logger.debug("Alert stream unsubscribed")

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def _start_connection(self) -> None:
        loop = self._loop or asyncio.get_running_loop()
        self._set_state(ConnectionState.CONNECTING)
        self._task = loop.create_task(self._run_connection())

    async def _run_connection(self) -> None:
        try:
            ws = await self._connector.connect(self._url)
        except Exception as exc:
            self._logger.info("Alert stream connect to %s failed: %s", self._url, exc)
            self._logger.debug("Alert stream connect error", exc_info=True)
            if self._is_current_task():
                self._on_connection_lost()
            return

        if self._consumer is None or not self._is_current_task():
            await ws.close()
            return

        self._ws = ws
        self._on_open()
        try:
            async for msg in ws:
                msg_type = getattr(msg, "type", None)
                if msg_type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                    self._dispatch(msg.data)
                elif msg_type == aiohttp.WSMsgType.ERROR:
                    self._logger.info("Alert stream error frame: %s", msg.data)
                    break
        except Exception:
            self._logger.info("Alert stream read failed", exc_info=True)
        finally:
            if self._ws is ws:
                self._ws = None
            if not ws.closed:
                try:
                    await ws.close()
                except Exception:
                    self._logger.debug("Alert stream close failed", exc_info=True)
        if self._is_current_task():
            self._on_connection_lost()

    def _is_current_task(self) -> bool:
        return self._task is not None and self._task is asyncio.current_task()

    def _on_open(self) -> None:
        self._cancel_retry()
        self._retries = 0
        self._set_state(ConnectionState.OPEN)
        self._logger.info("Alert stream connected url=%s", self._url)

    def _on_connection_lost(self) -> None:
        if self._consumer is None:
            return
        self._set_state(ConnectionState.CLOSED)
        limit = self._max_reconnect_attempts
        if limit is not None and self._retries >= limit:
            self._logger.warning("Alert stream giving up after %d reconnect attempt(s)", self._retries)
            return
        self._retries += 1
        self._schedule_retry()

    def _schedule_retry(self) -> None:
        if self._retry_handle is not None:
            return
        scheduler: RetryScheduler = self._scheduler or self._loop or asyncio.get_running_loop()
        self._logger.info("Alert stream disconnected, reconnecting in %.1fs", self._reconnect_delay)
        self._retry_handle = scheduler.call_later(self._reconnect_delay, self._on_retry_due)

    def _on_retry_due(self) -> None:
        self._retry_handle = None
        if self._consumer is None:
            return
        self._set_state(ConnectionState.RECONNECTING)
        self._start_connection()

    def _cancel_retry(self) -> None:
        handle = self._retry_handle
        self._retry_handle = None
        if handle is not None:
            handle.cancel()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, data: Any) -> None:
        try:
            event = decode_alert_event(data)
        except GeofenceDecodeError as exc:
            self._logger.warning("Dropping malformed alert message: %s", exc)
            self._logger.debug("Malformed alert payload: %s", redact_payload_for_log(data))
            return

        consumer = self._consumer
        if consumer is None:
            return
        try:
            consumer(event)
        except Exception:
            self._logger.warning("Alert consumer failed", exc_info=True)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._state = state
        self._logger.debug("Alert stream state=%s", state.value)
        if self._on_state_change is not None:
            try:
                self._on_state_change(state)
            except Exception:
                self._logger.debug("on_state_change callback failed", exc_info=True)
