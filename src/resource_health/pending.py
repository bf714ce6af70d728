"""Registry of in-flight health checks keyed by URL."""

import asyncio
import logging

from .errors import RunnerTornDownError
from .results import HealthCheckFailure, HealthCheckResult

logger = logging.getLogger(__name__)


class PendingRequests:
    """Maps each URL to the future every caller of that URL awaits.

    Entries outlive their resolution so that late duplicate calls get the
    same result; they are only dropped by ``clear()`` on teardown.
    """

    def __init__(self):
        self._futures: dict[str, asyncio.Future[HealthCheckResult]] = {}

    def acquire(self, url: str) -> tuple[asyncio.Future[HealthCheckResult], bool]:
        """Return the future for ``url`` and whether it was just created."""
        future = self._futures.get(url)
        if future is not None:
            return future, False

        future = asyncio.get_running_loop().create_future()
        self._futures[url] = future
        return future, True

    def resolve(self, url: str, result: HealthCheckResult) -> bool:
        """Complete the future for ``url``. Unknown or resolved URLs are ignored."""
        future = self._futures.get(url)
        if future is None or future.done():
            logger.debug("Ignoring duplicate or unknown resolution for %s", url)
            return False

        future.set_result(result)
        return True

    def clear(self):
        """Fail every unresolved future and drop all entries."""
        for url, future in self._futures.items():
            if not future.done():
                future.set_result(
                    HealthCheckFailure(
                        url=url,
                        error=RunnerTornDownError(f"Health check for {url} was abandoned by teardown"),
                    )
                )
        self._futures.clear()

    def __contains__(self, url: str) -> bool:
        return url in self._futures

    def __len__(self) -> int:
        return len(self._futures)
