from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import aiohttp
import pytest


@dataclass
class FakeFrame:
    type: aiohttp.WSMsgType
    data: Any


class FakeSocket:
    """In-memory websocket: frames are pushed by the test, ``None`` ends the stream."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[FakeFrame | BaseException | None] = asyncio.Queue()
        self._closed = False
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def push_text(self, data: str) -> None:
        self._queue.put_nowait(FakeFrame(aiohttp.WSMsgType.TEXT, data))

    def push_binary(self, data: bytes) -> None:
        self._queue.put_nowait(FakeFrame(aiohttp.WSMsgType.BINARY, data))

    def push_error(self) -> None:
        self._queue.put_nowait(FakeFrame(aiohttp.WSMsgType.ERROR, ConnectionResetError("reset by peer")))

    def fail(self, exc: BaseException) -> None:
        """Make the next read raise *exc*."""
        self._queue.put_nowait(exc)

    def drop(self) -> None:
        """Server-side close."""
        self._queue.put_nowait(None)

    async def close(self) -> None:
        self.close_calls += 1
        self._closed = True
        self._queue.put_nowait(None)

    def __aiter__(self) -> FakeSocket:
        return self

    async def __anext__(self) -> FakeFrame:
        frame = await self._queue.get()
        if frame is None:
            self._closed = True
            raise StopAsyncIteration
        if isinstance(frame, BaseException):
            raise frame
        return frame


HANG = object()


@dataclass
class FakeConnector:
    """Hands out queued outcomes: a FakeSocket, an exception to raise, or HANG."""

    outcomes: list[Any] = field(default_factory=list)
    sockets: list[FakeSocket] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)

    @property
    def attempts(self) -> int:
        return len(self.urls)

    async def connect(self, url: str) -> FakeSocket:
        self.urls.append(url)
        outcome = self.outcomes.pop(0) if self.outcomes else FakeSocket()
        if outcome is HANG:
            await asyncio.Event().wait()
        if isinstance(outcome, BaseException):
            raise outcome
        self.sockets.append(outcome)
        return outcome


@dataclass
class FakeHandle:
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeScheduler:
    """Records reconnect timers; the test fires them explicitly."""

    handles: list[FakeHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(delay=delay, callback=callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def fire(self) -> None:
        (handle,) = self.pending
        handle.fired = True
        handle.callback()


@dataclass
class RecordingSink:
    notices: list[tuple[str, Any]] = field(default_factory=list)

    def notify(self, message: str, event_type: Any = None) -> None:
        self.notices.append((message, event_type))


async def _settle() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


def _alert_payload(
    event_type: str = "entry",
    *,
    timestamp: str | int | float = "2026-01-01T08:00:00Z",
    vehicle_id: Any = "V1",
    vehicle_number: str = "KA-01-AB-1234",
    driver_name: str = "Asha",
    geofence_id: Any = "G1",
    geofence_name: str = "Central Depot",
    category: str = "delivery_zone",
) -> str:
    return json.dumps(
        {
            "vehicle": {"id": vehicle_id, "vehicle_number": vehicle_number, "driver_name": driver_name},
            "geofence": {"id": geofence_id, "geofence_name": geofence_name, "category": category},
            "event_type": event_type,
            "timestamp": timestamp,
        }
    )


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def settle() -> Callable[[], Awaitable[None]]:
    return _settle


@pytest.fixture
def alert_payload() -> Callable[..., str]:
    return _alert_payload


@pytest.fixture
def hang() -> object:
    return HANG


@pytest.fixture
def fake_socket_cls() -> type[FakeSocket]:
    return FakeSocket


@pytest.fixture
def utc() -> Callable[..., datetime]:
    def _make(*args: int) -> datetime:
        return datetime(*args, tzinfo=UTC)

    return _make
