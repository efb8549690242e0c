"""Per-client request throttling.

Each client address gets a visitor record holding the time of its last admitted
request and the number of requests admitted in the current window. The window
rolls over lazily: a record idle for longer than the window has its count reset
the next time the address shows up.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Final

logger = logging.getLogger(__name__)

WINDOW_SECONDS: Final[float] = 60.0
MAX_REQUESTS_PER_WINDOW: Final[int] = 60
DEFAULT_MAX_VISITORS: Final[int] = 10_000


@dataclass
class VisitorRecord:
    """Bookkeeping for one client address."""

    last_seen: float
    count: int


class RateLimiter:
    """Sliding-window request counter keyed by client address.

    The visitor table is bounded: when it is full, the least recently seen
    address is evicted to make room. All reads and writes of the table happen
    under a single lock so that the check and the increment are atomic.
    """

    def __init__(
        self,
        *,
        max_visitors: int = DEFAULT_MAX_VISITORS,
        window_seconds: float = WINDOW_SECONDS,
        max_requests: int = MAX_REQUESTS_PER_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_visitors < 1:
            raise ValueError("max_visitors must be positive")
        self.max_visitors = max_visitors
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._visitors: OrderedDict[str, VisitorRecord] = OrderedDict()
        self._lock = Lock()

    def allow(self, address: str) -> bool:
        """Record a request from `address` and report whether it may proceed."""
        now = self._clock()
        with self._lock:
            record = self._visitors.get(address)
            if record is None:
                self._visitors[address] = VisitorRecord(last_seen=now, count=1)
                self._evict_overflow()
                logger.debug("New visitor", extra={"ip": address})
                return True

            self._visitors.move_to_end(address)
            if now - record.last_seen > self.window_seconds:
                record.count = 0
                logger.info("Rate limit counter reset", extra={"ip": address})

            if record.count >= self.max_requests:
                logger.warning(
                    "Rate limit exceeded", extra={"ip": address, "count": record.count}
                )
                return False

            record.count += 1
            record.last_seen = now
            return True

    def snapshot(self, address: str) -> VisitorRecord | None:
        """Return a copy of the record for `address`, if any."""
        with self._lock:
            record = self._visitors.get(address)
            if record is None:
                return None
            return VisitorRecord(last_seen=record.last_seen, count=record.count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._visitors)

    def _evict_overflow(self) -> None:
        while len(self._visitors) > self.max_visitors:
            evicted, _ = self._visitors.popitem(last=False)
            logger.debug("Evicted idle visitor", extra={"ip": evicted})
