"""Rendered page runner."""

from typing import Any

from ..core import get_browser_pool
from ..crawl import BrowserCrawlerEngine, BrowserCrawlingContext
from ..errors import ExtractionError
from ..extract import snippet
from ..strategies import E2EStrategy, StrategyKind
from .base import HealthCheckRunner


class E2ERunner(HealthCheckRunner):
    """Renders the page in chromium and reads the first matching element."""

    kind = StrategyKind.E2E
    strategy_type = E2EStrategy
    engine_class = BrowserCrawlerEngine

    def engine_options(self) -> dict[str, Any]:
        BrowserPool = get_browser_pool()
        return {
            **super().engine_options(),
            # One page per worker
            "max_concurrency": self.settings.browser_pool_size,
            "browser_pool": BrowserPool(
                pool_size=self.settings.browser_pool_size,
                headless=self.settings.headless,
                user_agent=self.settings.user_agent,
            ),
            "navigation_timeout": self.settings.browser_timeout,
            "wait_until": self.settings.navigation_wait_until,
        }

    async def request_handler(self, context: BrowserCrawlingContext):
        strategy: E2EStrategy = context.request.user_data
        page = context.page

        await page.wait_for_load_state(strategy.wait_for_load_state)
        title = await page.locator(strategy.title_selector).first.text_content(
            timeout=self.settings.browser_timeout * 1000,
        )

        if not title:
            content = await page.content()
            raise ExtractionError(
                f"Could not retrieve {strategy.title_selector} text from {snippet(content)}"
            )

        self.success(context.request, title)
