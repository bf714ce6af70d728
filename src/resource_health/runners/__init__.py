"""Health check runners, one per strategy kind."""

from ..strategies import StrategyKind
from .base import HealthCheckRunner
from .e2e import E2ERunner
from .http import HttpRunner
from .pdf import PdfRunner
from .udemy import UdemyRunner
from .youtube import YoutubeRunner
from .zenscrape import ZenscrapeRunner

RUNNERS: dict[StrategyKind, type[HealthCheckRunner]] = {
    runner.kind: runner
    for runner in (
        PdfRunner,
        HttpRunner,
        E2ERunner,
        YoutubeRunner,
        ZenscrapeRunner,
        UdemyRunner,
    )
}

__all__ = [
    "RUNNERS",
    "HealthCheckRunner",
    "PdfRunner",
    "HttpRunner",
    "E2ERunner",
    "YoutubeRunner",
    "ZenscrapeRunner",
    "UdemyRunner",
]
