"""Notification sink interface for transient UI notices."""

from __future__ import annotations

import logging
from typing import Protocol

from pygeofence.models.alert import EventType


class NotificationSink(Protocol):
    """Receives a human-readable notice plus an optional event-type hint.

    Implementations render the notice (toast, log line, desktop popup).
    ``event_type`` is set for alert notices and ``None`` for other
    messages such as authoring errors.
    """

    def notify(self, message: str, event_type: EventType | None = None) -> None: ...


class LoggingNotificationSink:
    """Sink that writes notices to a logger; the default when none is given."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def notify(self, message: str, event_type: EventType | None = None) -> None:
        if event_type is None:
            self._logger.info("%s", message)
        else:
            self._logger.info("[%s] %s", event_type.value, message)
