#!/usr/bin/env python3
"""Live alert watcher for a geofencing backend.

Connects to the alert stream, keeps a bounded feed and prints one line
per crossing.  The connection is re-established automatically after
drops; press Ctrl+C to stop.

Configuration is read from ``GEOFENCE_API_URL`` / ``GEOFENCE_WS_URL``
and the other ``GEOFENCE_*`` variables.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pygeofence import (  # noqa: E402
    AlertFeed,
    AlertMonitor,
    ConnectionState,
    EventType,
    GeofenceClient,
    GeofenceConfig,
    GeofenceError,
)

_LOG = logging.getLogger("watch_alerts")


@dataclass
class WatchStats:
    started_at: float
    entries: int = 0
    exits: int = 0
    reconnects: int = 0


class PrintingSink:
    """Prints every notice and counts crossings."""

    def __init__(self, stats: WatchStats) -> None:
        self._stats = stats

    def notify(self, message: str, event_type: EventType | None = None) -> None:
        if event_type is EventType.ENTRY:
            self._stats.entries += 1
        elif event_type is EventType.EXIT:
            self._stats.exits += 1
        stamp = time.strftime("%H:%M:%S")
        print(f"[watch] {stamp} {message}")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch live geofence entry/exit alerts.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--feed-size",
        type=int,
        default=None,
        help="Feed capacity (defaults to GEOFENCE_FEED_CAPACITY or 50).",
    )
    parser.add_argument(
        "--show-feed",
        type=int,
        default=10,
        help="Number of most recent alerts to print on exit.",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print dashboard counters before watching.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_summary(stats: WatchStats, feed: AlertFeed, show: int) -> None:
    runtime = time.time() - stats.started_at
    print("[watch] Summary")
    print(f"[watch]   runtime_s  : {runtime:.1f}")
    print(f"[watch]   entries    : {stats.entries}")
    print(f"[watch]   exits      : {stats.exits}")
    print(f"[watch]   reconnects : {stats.reconnects}")
    for event in feed.state.recent(show):
        print(f"[watch]   {event.timestamp.isoformat()} {event.summary}")


async def _watch(config: GeofenceConfig, args: argparse.Namespace) -> WatchStats:
    stats = WatchStats(started_at=time.time())
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    def on_state_change(state: ConnectionState) -> None:
        if state is ConnectionState.RECONNECTING:
            stats.reconnects += 1
        _LOG.info("Alert stream %s", state.value)

    async with GeofenceClient(config) as client:
        if args.stats:
            dashboard = await client.get_dashboard_stats()
            print(
                f"[watch] geofences={dashboard.geofences} vehicles={dashboard.vehicles} "
                f"active_alerts={dashboard.active_alerts} violations={dashboard.violations}"
            )

        feed = AlertFeed(capacity=config.feed_capacity)
        stream = client.alert_stream(on_state_change=on_state_change)
        async with AlertMonitor(stream, feed=feed, sink=PrintingSink(stats)):
            print(f"[watch] Listening on {config.ws_url}")
            timeout = args.duration if args.duration > 0 else None
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(stop.wait(), timeout=timeout)

    _print_summary(stats, feed, args.show_feed)
    return stats


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {"feed_capacity": args.feed_size} if args.feed_size is not None else {}
    try:
        config = GeofenceConfig.from_env(**overrides)
    except GeofenceError as exc:
        print(f"[watch] Invalid configuration: {exc}", file=sys.stderr)
        return 2

    try:
        asyncio.run(_watch(config, args))
    except GeofenceError as exc:
        print(f"[watch] Failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
