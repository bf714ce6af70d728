"""Zenscrape proxy API runner."""

import asyncio
from typing import Any
from urllib.parse import quote

from ..crawl import CrawlingContext
from ..errors import ConfigurationError, ExtractionError, HttpStatusError, RateLimitedError
from ..extract import Extractor
from ..strategies import StrategyKind, ZenscrapeStrategy
from .base import HealthCheckRunner

API_URL = "https://app.zenscrape.com/api/v1/get"


def build_request_url(url: str, render: bool = False, premium: bool = False) -> str:
    """Zenscrape URL fetching ``url``.

    The API rejects ``false`` for its flags, so unset flags are left out.
    """
    request_url = f"{API_URL}?url={quote(url, safe='')}"

    if render:
        request_url = f"{request_url}&render=true"
    if premium:
        request_url = f"{request_url}&premium=true"

    return request_url


class ZenscrapeRunner(HealthCheckRunner):
    """Fetches the page through Zenscrape and reads the title selector.

    The API does not allow concurrent requests: the engine runs a single
    worker with a delay between requests, and a 429 answer is waited out
    and retried.
    """

    kind = StrategyKind.ZENSCRAPE
    strategy_type = ZenscrapeStrategy

    def engine_options(self) -> dict[str, Any]:
        return {
            **super().engine_options(),
            "max_concurrency": 1,
            "same_domain_delay": self.settings.zenscrape_same_domain_delay,
            "max_request_retries": self.settings.zenscrape_max_request_retries,
        }

    async def request_handler(self, context: CrawlingContext):
        request = context.request
        strategy: ZenscrapeStrategy = request.user_data

        if self.credentials.zenscrape_api_key is None:
            raise ConfigurationError("Zenscrape api key not found")

        response = await context.send_request(
            build_request_url(request.url, strategy.render, strategy.premium),
            headers={"apikey": self.credentials.zenscrape_api_key.get_secret_value()},
        )

        if response.status == 429:
            await asyncio.sleep(self.settings.rate_limit_delay)
            raise RateLimitedError("Concurrent requests are not supported")
        if not response.ok:
            raise HttpStatusError(request.url, response.status)

        extractor = Extractor(response.text)
        title = extractor.text(strategy.title_selector)
        if not title.strip():
            raise ExtractionError(f"Could not retrieve title text from {extractor.snippet()}")

        self.success(request, title)
