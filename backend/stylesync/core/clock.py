"""Time source. Components take a ``Clock`` so tests can control time."""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
