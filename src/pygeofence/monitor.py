"""Wiring of the live alert channel: stream -> feed -> notification sink."""

from __future__ import annotations

import logging
from typing import Any

from pygeofence.feed import AlertFeed
from pygeofence.models.alert import AlertEvent
from pygeofence.notify import LoggingNotificationSink, NotificationSink
from pygeofence.stream import AlertStream, Subscription

_logger = logging.getLogger(__name__)


class AlertMonitor:
    """Feeds every decoded alert into an :class:`AlertFeed` and a sink.

    For each event the feed is updated first, then the sink receives one
    notice, both synchronously with message arrival.

    Usage::

        async with AlertMonitor(stream) as monitor:
            ...
            visible = monitor.feed.state
    """

    def __init__(
        self,
        stream: AlertStream,
        *,
        feed: AlertFeed | None = None,
        sink: NotificationSink | None = None,
    ) -> None:
        self._stream = stream
        self._feed = feed if feed is not None else AlertFeed()
        self._sink: NotificationSink = sink if sink is not None else LoggingNotificationSink()
        self._subscription: Subscription | None = None

    @property
    def feed(self) -> AlertFeed:
        return self._feed

    @property
    def stream(self) -> AlertStream:
        return self._stream

    @property
    def running(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def start(self) -> None:
        """Subscribe to the stream; a no-op when already running."""
        if self.running:
            return
        self._subscription = self._stream.subscribe(self._on_alert)

    async def stop(self) -> None:
        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            await subscription.unsubscribe()

    async def __aenter__(self) -> AlertMonitor:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    def _on_alert(self, event: AlertEvent) -> None:
        self._feed.record(event)
        try:
            self._sink.notify(event.summary, event.event_type)
        except Exception:
            _logger.debug("Notification sink failed", exc_info=True)
