"""Per-domain request spacing."""

import asyncio
import time
from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass
class DomainState:
    """State tracking for a single domain."""
    domain: str
    last_request_time: float = 0.0
    request_count: int = 0
    error_count: int = 0
    delay: float = 0.0


class DomainManager:
    """Spaces consecutive requests to the same host by a fixed delay."""

    def __init__(self, default_delay: float = 0.0):
        self.default_delay = default_delay
        self._domains: dict[str, DomainState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _get_domain(self, url: str) -> str:
        """Extract domain from URL."""
        return urlparse(url).netloc

    def _get_lock(self, domain: str) -> asyncio.Lock:
        """Get or create lock for domain."""
        if domain not in self._locks:
            self._locks[domain] = asyncio.Lock()
        return self._locks[domain]

    def get_state(self, url: str) -> DomainState:
        """Get or create state for a domain."""
        domain = self._get_domain(url)

        if domain not in self._domains:
            self._domains[domain] = DomainState(domain=domain, delay=self.default_delay)

        return self._domains[domain]

    async def wait_for_rate_limit(self, url: str):
        """Wait if needed to respect the delay, then record the request."""
        state = self.get_state(url)
        lock = self._get_lock(state.domain)

        async with lock:
            if state.last_request_time:
                wait_time = state.delay - (time.monotonic() - state.last_request_time)
                if wait_time > 0:
                    await asyncio.sleep(wait_time)

            state.last_request_time = time.monotonic()
            state.request_count += 1

    def record_error(self, url: str):
        """Record an error for a domain."""
        domain = self._get_domain(url)
        if domain in self._domains:
            self._domains[domain].error_count += 1

    def get_stats(self) -> dict:
        """Get statistics for all domains."""
        return {
            domain: {
                "request_count": state.request_count,
                "error_count": state.error_count,
                "delay": state.delay,
            }
            for domain, state in self._domains.items()
        }

    def reset(self):
        self._domains.clear()
        self._locks.clear()
