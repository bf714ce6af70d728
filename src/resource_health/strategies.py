"""Health check strategies, one model per retrieval medium.

The ``kind`` field selects both the runner and the model, so a descriptor
whose fields do not belong to its kind fails validation.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class StrategyKind(str, Enum):
    PDF = "pdf"
    HTTP = "http"
    E2E = "e2e"
    YOUTUBE = "youtube"
    ZENSCRAPE = "zenscrape"
    UDEMY = "udemy"


LoadState = Literal["load", "domcontentloaded", "networkidle"]


class BaseStrategy(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PdfStrategy(BaseStrategy):
    """Download the resource and check it is a PDF file."""

    kind: Literal["pdf"] = "pdf"


class HttpStrategy(BaseStrategy):
    """Fetch static HTML and read the title with a CSS selector."""

    kind: Literal["http"] = "http"
    title_selector: str


class E2EStrategy(BaseStrategy):
    """Render the page in a headless browser and read the title."""

    kind: Literal["e2e"] = "e2e"
    title_selector: str
    # https://playwright.dev/python/docs/api/class-page#page-wait-for-load-state
    wait_for_load_state: LoadState = "load"


class YoutubeStrategy(BaseStrategy):
    """Look the video, playlist or channel up in the YouTube Data API."""

    kind: Literal["youtube"] = "youtube"


class ZenscrapeStrategy(BaseStrategy):
    """Fetch the page through the Zenscrape proxy API."""

    kind: Literal["zenscrape"] = "zenscrape"
    title_selector: str
    render: bool = False
    premium: bool = False


class UdemyStrategy(BaseStrategy):
    """Look the course up in the Udemy affiliate API."""

    kind: Literal["udemy"] = "udemy"


Strategy = Annotated[
    Union[
        PdfStrategy,
        HttpStrategy,
        E2EStrategy,
        YoutubeStrategy,
        ZenscrapeStrategy,
        UdemyStrategy,
    ],
    Field(discriminator="kind"),
]

_strategy_adapter: TypeAdapter[Strategy] = TypeAdapter(Strategy)


def parse_strategy(data: Any) -> Strategy:
    """Validate a raw strategy descriptor, e.g. ``{"kind": "http", "titleSelector": "h1"}``."""
    return _strategy_adapter.validate_python(data)
