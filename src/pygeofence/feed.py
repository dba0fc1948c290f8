"""Bounded, newest-first view over the live alert stream.

The feed is the single source of truth for which alerts are visible.
It is a pure in-memory model: ``record`` never performs I/O and never
blocks.
"""

from __future__ import annotations

import contextlib
import logging
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from pygeofence._constants import FEED_CAPACITY
from pygeofence.models.alert import AlertEvent

_logger = logging.getLogger(__name__)

FeedListener = Callable[["AlertFeedState"], None]


@dataclass(frozen=True, slots=True)
class AlertFeedState:
    """Immutable snapshot of the feed, newest event first.

    A new instance is produced on every change, so consumers can detect
    updates by identity.
    """

    events: tuple[AlertEvent, ...] = ()
    capacity: int = FEED_CAPACITY

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[AlertEvent]:
        return iter(self.events)

    def __getitem__(self, index: int) -> AlertEvent:
        return self.events[index]

    @property
    def latest(self) -> AlertEvent | None:
        return self.events[0] if self.events else None

    def recent(self, count: int) -> tuple[AlertEvent, ...]:
        """The *count* newest events (the dashboard shows the top 10)."""
        return self.events[:count]


class AlertFeed:
    """Fixed-capacity alert feed.

    Events are kept in arrival order, newest at index 0.  Once the feed
    holds *capacity* events, each new arrival evicts the oldest one.  No
    deduplication is performed: a crossing delivered twice is shown twice.
    """

    def __init__(self, capacity: int = FEED_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._events: deque[AlertEvent] = deque(maxlen=capacity)
        self._state = AlertFeedState(capacity=capacity)
        self._listeners: list[FeedListener] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def state(self) -> AlertFeedState:
        return self._state

    def __len__(self) -> int:
        return len(self._events)

    def record(self, event: AlertEvent) -> AlertFeedState:
        """Prepend *event*, evicting the tail when over capacity."""
        # deque(maxlen=...) drops from the opposite end on appendleft.
        self._events.appendleft(event)
        self._publish(AlertFeedState(events=tuple(self._events), capacity=self._capacity))
        return self._state

    def clear(self) -> AlertFeedState:
        self._events.clear()
        self._publish(AlertFeedState(capacity=self._capacity))
        return self._state

    def add_listener(self, listener: FeedListener) -> Callable[[], None]:
        """Register *listener* for new states; returns a remove handle."""
        self._listeners.append(listener)

        def _remove() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _remove

    def _publish(self, state: AlertFeedState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.debug("Alert feed listener failed", exc_info=True)
