"""Browser page pool using Playwright."""

import asyncio
import logging

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)


class BrowserPool:
    """Lazily launched chromium with a fixed set of reusable pages."""

    def __init__(
        self,
        pool_size: int = 3,
        headless: bool = True,
        user_agent: str | None = None,
    ):
        self.pool_size = pool_size
        self.headless = headless
        self.user_agent = user_agent
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._pages: asyncio.Queue[Page] = asyncio.Queue()
        self._lock = asyncio.Lock()
        self._initialized = False

    @property
    def is_open(self) -> bool:
        return self._initialized

    async def _initialize(self):
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return

            logger.info("Launching chromium (headless=%s, pages=%d)", self.headless, self.pool_size)
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)

            context_opts = {}
            if self.user_agent:
                context_opts["user_agent"] = self.user_agent
            self._context = await self._browser.new_context(**context_opts)

            for _ in range(self.pool_size):
                await self._pages.put(await self._context.new_page())

            self._initialized = True

    async def acquire(self) -> Page:
        """Take a page from the pool, launching the browser on first use."""
        await self._initialize()
        return await self._pages.get()

    async def release(self, page: Page):
        """Hand a page back. Crashed pages are replaced with fresh ones."""
        if not self._initialized:
            return
        if page.is_closed():
            page = await self._context.new_page()
        await self._pages.put(page)

    async def close(self):
        """Close all browser resources."""
        self._initialized = False
        self._pages = asyncio.Queue()
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
            self._context = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
