"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8080"
WS_URL = "ws://localhost:8080/ws/alerts"
USER_AGENT = "pygeofence"

#: Fixed delay between a lost alert-stream connection and the next attempt.
RECONNECT_DELAY_SECONDS: float = 3.0

#: Maximum number of alerts kept in the live feed.
FEED_CAPACITY: int = 50

#: Three distinct vertices plus the repeated closing point.
MIN_RING_POINTS: int = 4
