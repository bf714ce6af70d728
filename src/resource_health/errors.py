"""Exceptions raised while checking resources.

Request handlers raise these; the crawler engine uses the class to decide
whether a request is retried, and the runner turns the final one into a
``HealthCheckFailure``.
"""


class HealthCheckError(Exception):
    """Base exception for all health check errors."""


class NonRetryableError(HealthCheckError):
    """The crawler engine must not retry the request that raised this."""


class ConfigurationError(NonRetryableError):
    """Missing credentials or a URL the strategy cannot handle."""


class ExtractionError(NonRetryableError):
    """The resource was fetched but no title could be extracted from it."""


class RetryableError(HealthCheckError):
    """Transient failure, the crawler engine retries within its budget."""


class BlockedError(RetryableError):
    """The target answered with a status that looks like bot protection."""

    def __init__(self, url: str, status: int):
        super().__init__(f"Request to {url} was blocked with status {status}")
        self.url = url
        self.status = status


class RateLimitedError(RetryableError):
    """An upstream API rejected the request for exceeding its rate limit."""


class HttpStatusError(HealthCheckError):
    """Response status >= 400. Only server errors are worth retrying."""

    def __init__(self, url: str, status: int):
        super().__init__(f"Request to {url} failed with status {status}")
        self.url = url
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.status >= 500


class CrawlerStoppedError(HealthCheckError):
    """Requests were added to a crawler that is shutting down or stopped."""


class RunnerTornDownError(HealthCheckError):
    """The runner was torn down before the check completed."""
