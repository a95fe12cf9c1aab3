"""In-memory request counters reported by the status endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any


class RequestTracker:
    """Track a single chat request from receipt to the end of its response."""

    def __init__(self, counters: "UsageCounters") -> None:
        self._counters = counters
        self._finished = False

    def finish(self, *, failed: bool = False) -> None:
        if self._finished:
            return
        self._finished = True
        self._counters.finish_request(failed=failed)


@dataclass
class UsageCounters:
    """Thread-safe counters for request lifecycle tracking."""

    _lock: Lock = field(default_factory=Lock, repr=False)
    _started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    _received: int = 0
    _served: int = 0
    _failed: int = 0
    _ongoing: int = 0

    def start_request(self) -> RequestTracker:
        with self._lock:
            self._received += 1
            self._ongoing += 1
        return RequestTracker(self)

    def finish_request(self, *, failed: bool = False) -> None:
        with self._lock:
            if failed:
                self._failed += 1
            else:
                self._served += 1
            self._ongoing = max(0, self._ongoing - 1)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "started_at": self._started_at,
                "received": self._received,
                "served": self._served,
                "failed": self._failed,
                "ongoing": self._ongoing,
            }


USAGE_COUNTERS = UsageCounters()
