"""Shared fixtures."""

import pytest

from resource_health.config import Credentials, HealthCheckSettings


@pytest.fixture
def settings():
    """Settings for fast tests: no retries, short delays."""
    return HealthCheckSettings(
        max_concurrency=2,
        max_request_retries=0,
        request_handler_timeout=5.0,
        poll_interval=0.01,
        rate_limit_delay=0.05,
        zenscrape_max_request_retries=0,
        zenscrape_same_domain_delay=0.0,
    )


@pytest.fixture
def credentials():
    return Credentials(
        youtube_api_key="yt-key",
        zenscrape_api_key="zs-key",
        udemy_affiliate_api_client_id="client-id",
        udemy_affiliate_api_client_secret="client-secret",
    )


@pytest.fixture
def no_credentials():
    return Credentials(
        youtube_api_key=None,
        zenscrape_api_key=None,
        udemy_affiliate_api_client_id=None,
        udemy_affiliate_api_client_secret=None,
        _env_file=None,
    )


@pytest.fixture
async def make_runner(settings, credentials):
    """Build runners that are torn down after the test."""
    runners = []

    def factory(runner_class, **kwargs):
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("credentials", credentials)
        runner = runner_class(**kwargs)
        runners.append(runner)
        return runner

    yield factory

    for runner in runners:
        await runner.teardown()
