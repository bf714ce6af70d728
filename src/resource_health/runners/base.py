"""Shared behaviour of the health check runners."""

import asyncio
import logging
from typing import Any, ClassVar

from ..config import Credentials, HealthCheckSettings, settings as default_settings
from ..core import HttpFetcher
from ..crawl import CrawlerEngine, CrawlingContext
from ..errors import CrawlerStoppedError
from ..frontier import Request
from ..pending import PendingRequests
from ..results import HealthCheckFailure, HealthCheckResult, HealthCheckSuccess
from ..strategies import BaseStrategy, StrategyKind

logger = logging.getLogger(__name__)


class HealthCheckRunner:
    """Checks URLs with one strategy.

    Every runner owns a crawler engine and a registry of pending checks. The
    first ``run()`` for a URL queues it in the engine; later calls for the
    same URL wait on the same result.
    """

    kind: ClassVar[StrategyKind]
    strategy_type: ClassVar[type[BaseStrategy]]
    engine_class: ClassVar[type[CrawlerEngine]] = CrawlerEngine

    def __init__(
        self,
        settings: HealthCheckSettings | None = None,
        credentials: Credentials | None = None,
        **engine_options: Any,
    ):
        self.settings = settings or default_settings
        self.credentials = credentials if credentials is not None else Credentials()
        self.pending = PendingRequests()
        self.crawler = self.engine_class(
            self.request_handler,
            self.failed_request_handler,
            **{**self.engine_options(), **engine_options},
        )

    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for the engine, derived from settings."""
        return {
            "max_concurrency": self.settings.max_concurrency,
            "max_request_retries": self.settings.max_request_retries,
            "request_handler_timeout": self.settings.request_handler_timeout,
            "poll_interval": self.settings.poll_interval,
            "retry_on_blocked": True,
            "keep_alive": True,
            "fetcher": HttpFetcher(
                timeout=self.settings.timeout,
                user_agent=self.settings.user_agent,
                max_connections=self.settings.max_connections,
                max_keepalive_connections=self.settings.max_keepalive_connections,
            ),
        }

    async def run(self, url: str, strategy: BaseStrategy) -> HealthCheckResult:
        """Check ``url``. Concurrent calls for one URL share a single check."""
        if not isinstance(strategy, self.strategy_type):
            raise TypeError(
                f"{type(self).__name__} expects {self.strategy_type.__name__}, got {type(strategy).__name__}"
            )

        future, is_new = self.pending.acquire(url)
        if is_new:
            try:
                await self.crawler.add_requests([Request(url=url, user_data=strategy)])
                self.crawler.start()
            except CrawlerStoppedError as error:
                self.pending.resolve(url, HealthCheckFailure(url=url, error=error))

        # One caller giving up must not cancel the result for the others
        return await asyncio.shield(future)

    def success(self, request: Request, title: str):
        logger.debug("Health check succeeded for %s: %r", request.url, title)
        self.pending.resolve(request.url, HealthCheckSuccess(url=request.url, title=title))

    def failure(self, request: Request, error: Exception):
        logger.debug("Health check failed for %s: %s", request.url, error)
        self.pending.resolve(request.url, HealthCheckFailure(url=request.url, error=error))

    async def request_handler(self, context: CrawlingContext):
        raise NotImplementedError

    async def failed_request_handler(self, request: Request, error: Exception):
        self.failure(request, error)

    async def teardown(self):
        """Stop the engine and fail every check still waiting."""
        try:
            await self.crawler.teardown()
        finally:
            self.pending.clear()
