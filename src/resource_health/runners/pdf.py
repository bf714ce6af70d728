"""PDF file runner."""

from ..crawl import CrawlingContext
from ..errors import ExtractionError
from ..filetypes import PDF, sniff_file_type
from ..strategies import PdfStrategy, StrategyKind
from .base import HealthCheckRunner


def title_from_url(url: str) -> str:
    """Last path segment of the URL, i.e. the file name."""
    return url.split("?", 1)[0].rstrip("/").split("/")[-1]


class PdfRunner(HealthCheckRunner):
    """Downloads the resource and checks its signature is a PDF's."""

    kind = StrategyKind.PDF
    strategy_type = PdfStrategy

    async def request_handler(self, context: CrawlingContext):
        request = context.request
        response = await context.send_request()
        request.loaded_url = response.url

        file_type = sniff_file_type(response.content)
        if file_type != PDF:
            detected = f"{file_type.ext} ({file_type.mime})" if file_type else "unknown"
            raise ExtractionError(
                f"The received buffer is not a pdf. The buffer is instead a {detected} filetype"
            )

        self.success(request, title_from_url(request.url))
