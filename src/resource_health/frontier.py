"""In-memory request queue for a crawler engine."""

from collections import deque
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Request:
    """A URL to check, with the strategy it is checked with."""
    url: str
    user_data: Any = None
    retry_count: int = 0
    no_retry: bool = False
    max_retries: int | None = None
    loaded_url: str | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def unique_key(self) -> str:
        return self.url


class Frontier:
    """FIFO queue of requests, deduplicated by unique key.

    A request is pending, in progress or handled. Retried requests are
    reclaimed to the back of the queue.
    """

    def __init__(self):
        self._pending: deque[Request] = deque()
        self._in_progress: dict[str, Request] = {}
        self._handled: dict[str, Request] = {}
        self._known: set[str] = set()

    def add(self, request: Request) -> bool:
        """Add a request. Returns False if its key was already queued."""
        if request.unique_key in self._known:
            return False

        self._known.add(request.unique_key)
        self._pending.append(request)
        return True

    def add_many(self, requests: list[Request]) -> int:
        """Add multiple requests. Returns count of new requests added."""
        added = 0
        for request in requests:
            if self.add(request):
                added += 1
        return added

    def get_next(self) -> Request | None:
        """Take the oldest pending request and mark it in progress."""
        if not self._pending:
            return None

        request = self._pending.popleft()
        self._in_progress[request.unique_key] = request
        return request

    def reclaim(self, request: Request):
        """Put an in-progress request back at the end of the queue."""
        if self._in_progress.pop(request.unique_key, None) is not None:
            self._pending.append(request)

    def mark_handled(self, request: Request):
        """Mark a request as finished, successfully or not."""
        if self._in_progress.pop(request.unique_key, None) is not None:
            self._handled[request.unique_key] = request

    def get_request(self, url: str) -> Request | None:
        """Look a request up in any state."""
        if url in self._in_progress:
            return self._in_progress[url]
        if url in self._handled:
            return self._handled[url]
        for request in self._pending:
            if request.unique_key == url:
                return request
        return None

    def pending_count(self) -> int:
        return len(self._pending)

    def is_finished(self) -> bool:
        """True when nothing is pending or in progress."""
        return not self._pending and not self._in_progress

    def stats(self) -> dict:
        """Get queue statistics."""
        stats = {
            "pending": len(self._pending),
            "in_progress": len(self._in_progress),
            "handled": len(self._handled),
        }
        stats["total"] = sum(stats.values())
        return stats

    def drop(self):
        """Forget every request."""
        self._pending.clear()
        self._in_progress.clear()
        self._handled.clear()
        self._known.clear()
