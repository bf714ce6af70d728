"""Static HTML runner."""

from ..crawl import HttpCrawlerEngine, HttpCrawlingContext
from ..errors import ExtractionError
from ..extract import Extractor
from ..strategies import HttpStrategy, StrategyKind
from .base import HealthCheckRunner


class HttpRunner(HealthCheckRunner):
    """Fetches the page without rendering it and reads the title selector."""

    kind = StrategyKind.HTTP
    strategy_type = HttpStrategy
    engine_class = HttpCrawlerEngine

    async def request_handler(self, context: HttpCrawlingContext):
        strategy: HttpStrategy = context.request.user_data
        extractor = Extractor(context.parser)

        title = extractor.title(strategy.title_selector)
        if not title.strip():
            raise ExtractionError(
                f"Could not retrieve {strategy.title_selector} text from {extractor.snippet()}"
            )

        self.success(context.request, title)
