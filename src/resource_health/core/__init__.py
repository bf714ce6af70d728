"""Transport components shared by the crawler engines."""

from .fetcher import HttpFetcher
from .protocols import Response

__all__ = ["Response", "HttpFetcher"]


# Lazy import, playwright is only loaded by runners that render pages
def get_browser_pool():
    from .browser import BrowserPool
    return BrowserPool
