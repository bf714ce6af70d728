"""Health checks for cataloged external resources."""

from .healthcheck import HealthCheck
from .results import HealthCheckFailure, HealthCheckResult, HealthCheckSuccess
from .strategies import (
    E2EStrategy,
    HttpStrategy,
    PdfStrategy,
    StrategyKind,
    UdemyStrategy,
    YoutubeStrategy,
    ZenscrapeStrategy,
    parse_strategy,
)

__version__ = "0.1.0"

__all__ = [
    "HealthCheck",
    "HealthCheckResult",
    "HealthCheckSuccess",
    "HealthCheckFailure",
    "StrategyKind",
    "PdfStrategy",
    "HttpStrategy",
    "E2EStrategy",
    "YoutubeStrategy",
    "ZenscrapeStrategy",
    "UdemyStrategy",
    "parse_strategy",
]
