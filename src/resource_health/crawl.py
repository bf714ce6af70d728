"""Crawler engines with async concurrency.

An engine owns a request queue and a pool of workers. Each worker takes the
next request, builds a crawling context for it (plain, fetched HTML or a
browser page, depending on the engine) and runs the request handler. Errors
are retried within the retry budget; when it is exhausted the failed request
handler is called instead.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from selectolax.parser import HTMLParser

from .core import HttpFetcher, Response, get_browser_pool
from .domain_manager import DomainManager
from .errors import BlockedError, CrawlerStoppedError, HttpStatusError, NonRetryableError
from .frontier import Frontier, Request

if TYPE_CHECKING:
    from playwright.async_api import Page

    from .core.browser import BrowserPool

logger = logging.getLogger(__name__)

# Statuses bot protection answers with
BLOCKED_STATUS_CODES = frozenset({401, 403, 429})


class CrawlerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


SendRequest = Callable[..., Awaitable[Response]]


@dataclass
class CrawlingContext:
    request: Request
    send_request: SendRequest


@dataclass
class HttpCrawlingContext(CrawlingContext):
    response: Response
    parser: HTMLParser


@dataclass
class BrowserCrawlingContext(CrawlingContext):
    page: "Page"
    status: int | None


RequestHandler = Callable[[Any], Awaitable[None]]
FailedRequestHandler = Callable[[Request, Exception], Awaitable[None]]


class CrawlerEngine:
    """Queue-driven engine; the request handler does its own fetching."""

    def __init__(
        self,
        request_handler: RequestHandler,
        failed_request_handler: FailedRequestHandler | None = None,
        *,
        max_concurrency: int = 5,
        max_request_retries: int = 3,
        request_handler_timeout: float = 60.0,
        same_domain_delay: float = 0.0,
        retry_on_blocked: bool = True,
        keep_alive: bool = True,
        fetcher: HttpFetcher | None = None,
        poll_interval: float = 0.1,
    ):
        self.request_handler = request_handler
        self.failed_request_handler = failed_request_handler
        self.max_concurrency = max_concurrency
        self.max_request_retries = max_request_retries
        self.request_handler_timeout = request_handler_timeout
        self.same_domain_delay = same_domain_delay
        self.retry_on_blocked = retry_on_blocked
        self.keep_alive = keep_alive
        self.poll_interval = poll_interval

        self.fetcher = fetcher or HttpFetcher()
        self.frontier = Frontier()
        self.domain_manager = DomainManager(default_delay=same_domain_delay)

        self._state = CrawlerState.IDLE
        self._workers: list[asyncio.Task] = []
        self._active_workers = 0
        self._stats = {"requests_finished": 0, "requests_failed": 0, "retries": 0}

    @property
    def state(self) -> CrawlerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is CrawlerState.RUNNING

    async def add_requests(self, requests: Iterable[Request | str]) -> int:
        """Queue requests. Returns the number of new ones."""
        if self._state in (CrawlerState.SHUTTING_DOWN, CrawlerState.STOPPED):
            raise CrawlerStoppedError(f"Cannot add requests to a crawler that is {self._state.value}")

        return self.frontier.add_many(
            [r if isinstance(r, Request) else Request(url=r) for r in requests]
        )

    def start(self):
        """Spawn the workers. Does nothing if they are already running."""
        if self._state is CrawlerState.RUNNING:
            return
        if self._state is not CrawlerState.IDLE:
            raise CrawlerStoppedError(f"Cannot start a crawler that is {self._state.value}")

        logger.debug("Starting %s with %d workers", type(self).__name__, self.max_concurrency)
        self._state = CrawlerState.RUNNING
        self._active_workers = self.max_concurrency
        self._workers = [
            asyncio.create_task(self._worker(i))
            for i in range(self.max_concurrency)
        ]

    async def run(self, requests: Iterable[Request | str] | None = None):
        """Queue ``requests`` and wait until the workers stop.

        Without keep-alive the workers stop once the queue is drained; with
        keep-alive this only returns after ``teardown()``.
        """
        if requests is not None:
            await self.add_requests(requests)
        self.start()

        workers = list(self._workers)
        if not workers:
            return
        done, _ = await asyncio.wait(workers)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

    async def _worker(self, worker_id: int):
        """Worker coroutine that processes requests from the frontier."""
        try:
            while self._state is CrawlerState.RUNNING:
                request = self.frontier.get_next()
                if request is None:
                    if not self.keep_alive and self.frontier.is_finished():
                        break
                    await asyncio.sleep(self.poll_interval)
                    continue

                await self._process_request(request)
        finally:
            self._active_workers -= 1
            if self._active_workers == 0 and self._state is CrawlerState.RUNNING:
                self._state = CrawlerState.IDLE
                self._workers = []
                logger.debug("%s is idle", type(self).__name__)

    async def _process_request(self, request: Request):
        if self.same_domain_delay > 0:
            await self.domain_manager.wait_for_rate_limit(request.url)

        logger.debug("Processing %s (attempt %d)", request.url, request.retry_count + 1)
        try:
            await asyncio.wait_for(
                self._run_request_handler(request),
                timeout=self.request_handler_timeout,
            )
        except Exception as error:
            if isinstance(error, TimeoutError) and not str(error):
                error = TimeoutError(
                    f"Request handler for {request.url} timed out after {self.request_handler_timeout}s"
                )
            await self._handle_request_error(request, error)
        else:
            self.frontier.mark_handled(request)
            self._stats["requests_finished"] += 1

    async def _run_request_handler(self, request: Request):
        context = await self._create_context(request)
        try:
            await self.request_handler(context)
        finally:
            await self._release_context(context)

    async def _handle_request_error(self, request: Request, error: Exception):
        request.errors.append(f"{type(error).__name__}: {error}")
        if isinstance(error, NonRetryableError):
            request.no_retry = True
        self.domain_manager.record_error(request.url)

        if self._should_retry(request, error):
            request.retry_count += 1
            self._stats["retries"] += 1
            logger.warning(
                "Retrying %s (%d/%d): %s",
                request.url, request.retry_count, self._max_retries_for(request), error,
            )
            self.frontier.reclaim(request)
            return

        self.frontier.mark_handled(request)
        self._stats["requests_failed"] += 1
        logger.error("Request %s failed after %d attempt(s): %s", request.url, request.retry_count + 1, error)

        if self.failed_request_handler is not None:
            try:
                await self.failed_request_handler(request, error)
            except Exception:
                logger.exception("Failed request handler raised for %s", request.url)

    def _max_retries_for(self, request: Request) -> int:
        if request.max_retries is not None:
            return request.max_retries
        return self.max_request_retries

    def _should_retry(self, request: Request, error: Exception) -> bool:
        if request.no_retry:
            return False

        # Client errors will not go away on their own
        if isinstance(error, HttpStatusError) and not error.retryable:
            return False

        return request.retry_count < self._max_retries_for(request)

    def _send_request_for(self, request: Request) -> SendRequest:
        async def send_request(
            url: str | None = None,
            *,
            headers: dict[str, str] | None = None,
            auth: tuple[str, str] | None = None,
        ) -> Response:
            return await self.fetcher.fetch(url or request.url, headers=headers, auth=auth)

        return send_request

    def _check_status(self, url: str, status: int):
        if self.retry_on_blocked and status in BLOCKED_STATUS_CODES:
            raise BlockedError(url, status)
        if status >= 400:
            raise HttpStatusError(url, status)

    async def _create_context(self, request: Request) -> CrawlingContext:
        return CrawlingContext(
            request=request,
            send_request=self._send_request_for(request),
        )

    async def _release_context(self, context: CrawlingContext):
        pass

    async def _close(self):
        await self.fetcher.close()

    async def teardown(self):
        """Drop queued requests, stop the workers and release resources.

        Safe to call on an engine that never started, and more than once.
        """
        if self._state in (CrawlerState.SHUTTING_DOWN, CrawlerState.STOPPED):
            return

        logger.debug("Tearing down %s", type(self).__name__)
        self._state = CrawlerState.SHUTTING_DOWN
        self.frontier.drop()

        workers, self._workers = self._workers, []
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

        try:
            await self._close()
        finally:
            self.domain_manager.reset()
            self._state = CrawlerState.STOPPED

    def get_stats(self) -> dict:
        return {
            **self.frontier.stats(),
            **self._stats,
            "domains": self.domain_manager.get_stats(),
        }


class HttpCrawlerEngine(CrawlerEngine):
    """Fetches each request's URL and parses the HTML before the handler runs."""

    async def _create_context(self, request: Request) -> HttpCrawlingContext:
        response = await self.fetcher.fetch(request.url)
        request.loaded_url = response.url
        self._check_status(request.url, response.status)

        return HttpCrawlingContext(
            request=request,
            send_request=self._send_request_for(request),
            response=response,
            parser=HTMLParser(response.text),
        )


class BrowserCrawlerEngine(CrawlerEngine):
    """Opens each request's URL in a pooled browser page."""

    def __init__(
        self,
        request_handler: RequestHandler,
        failed_request_handler: FailedRequestHandler | None = None,
        *,
        browser_pool: "BrowserPool | None" = None,
        navigation_timeout: float = 30.0,
        wait_until: str = "domcontentloaded",
        **kwargs,
    ):
        super().__init__(request_handler, failed_request_handler, **kwargs)
        if browser_pool is None:
            browser_pool = get_browser_pool()(
                pool_size=self.max_concurrency,
                user_agent=self.fetcher.user_agent,
            )
        self.browser_pool = browser_pool
        self.navigation_timeout = navigation_timeout
        self.wait_until = wait_until

    async def _create_context(self, request: Request) -> BrowserCrawlingContext:
        page = await self.browser_pool.acquire()
        try:
            response = await page.goto(
                request.url,
                timeout=self.navigation_timeout * 1000,  # Playwright uses milliseconds
                wait_until=self.wait_until,
            )
            request.loaded_url = page.url
            status = response.status if response is not None else None
            if status is not None:
                self._check_status(request.url, status)
        except BaseException:
            await self.browser_pool.release(page)
            raise

        return BrowserCrawlingContext(
            request=request,
            send_request=self._send_request_for(request),
            page=page,
            status=status,
        )

    async def _release_context(self, context: BrowserCrawlingContext):
        await self.browser_pool.release(context.page)

    async def _close(self):
        await super()._close()
        await self.browser_pool.close()
