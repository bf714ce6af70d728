"""Tests for the behaviour shared by every runner."""

import asyncio

import pytest

from resource_health.crawl import CrawlerState
from resource_health.errors import CrawlerStoppedError, ExtractionError, RunnerTornDownError
from resource_health.results import HealthCheckFailure, HealthCheckSuccess
from resource_health.runners import HttpRunner
from resource_health.runners.base import HealthCheckRunner
from resource_health.strategies import HttpStrategy, PdfStrategy, StrategyKind


class ScriptedRunner(HealthCheckRunner):
    """Runner whose handler is driven by the test."""

    kind = StrategyKind.HTTP
    strategy_type = HttpStrategy

    def __init__(self, **kwargs):
        self.calls: list[str] = []
        self.release = asyncio.Event()
        self.titles: dict[str, str] = {}
        self.block = False
        super().__init__(**kwargs)

    async def request_handler(self, context):
        url = context.request.url
        self.calls.append(url)
        if self.block:
            await self.release.wait()
        if url not in self.titles:
            raise ExtractionError(f"no title for {url}")
        self.success(context.request, self.titles[url])


STRATEGY = HttpStrategy(title_selector="h1")


class TestDeduplication:
    async def test_concurrent_runs_share_one_check(self, make_runner):
        """Concurrent checks of one URL run once and share the result."""
        runner = make_runner(ScriptedRunner)
        runner.titles["http://example.com/"] = "Example"
        runner.block = True

        first = asyncio.create_task(runner.run("http://example.com/", STRATEGY))
        second = asyncio.create_task(runner.run("http://example.com/", STRATEGY))
        await asyncio.sleep(0.05)
        runner.release.set()

        results = await asyncio.gather(first, second)

        assert runner.calls == ["http://example.com/"]
        assert results[0] is results[1]
        assert results[0] == HealthCheckSuccess(url="http://example.com/", title="Example")

    async def test_late_duplicate_gets_cached_result(self, make_runner):
        """A check of an already resolved URL returns the same result."""
        runner = make_runner(ScriptedRunner)
        runner.titles["http://example.com/"] = "Example"

        first = await runner.run("http://example.com/", STRATEGY)
        second = await runner.run("http://example.com/", STRATEGY)

        assert first is second
        assert runner.calls == ["http://example.com/"]

    async def test_urls_are_isolated(self, make_runner):
        """Different URLs get their own results."""
        runner = make_runner(ScriptedRunner)
        runner.titles["http://example.com/a"] = "A"
        runner.titles["http://example.com/b"] = "B"

        a, b = await asyncio.gather(
            runner.run("http://example.com/a", STRATEGY),
            runner.run("http://example.com/b", STRATEGY),
        )

        assert a.title == "A"
        assert b.title == "B"

    async def test_cancelled_caller_does_not_cancel_others(self, make_runner):
        """One caller giving up leaves the shared check running."""
        runner = make_runner(ScriptedRunner)
        runner.titles["http://example.com/"] = "Example"
        runner.block = True

        impatient = asyncio.create_task(runner.run("http://example.com/", STRATEGY))
        patient = asyncio.create_task(runner.run("http://example.com/", STRATEGY))
        await asyncio.sleep(0.05)
        impatient.cancel()
        runner.release.set()

        result = await patient
        assert result.success is True


class TestResolution:
    async def test_failure_result(self, make_runner):
        """Handler errors become failure results for the requested URL."""
        runner = make_runner(ScriptedRunner)

        result = await runner.run("http://example.com/", STRATEGY)

        assert isinstance(result, HealthCheckFailure)
        assert result.url == "http://example.com/"
        assert isinstance(result.error, ExtractionError)

    async def test_success_is_idempotent(self, make_runner):
        """Resolving a URL twice keeps the first result."""
        runner = make_runner(ScriptedRunner)
        runner.titles["http://example.com/"] = "Example"
        result = await runner.run("http://example.com/", STRATEGY)

        request = runner.crawler.frontier.get_request("http://example.com/")
        runner.success(request, "Other")
        runner.failure(request, RuntimeError("late"))

        assert await runner.run("http://example.com/", STRATEGY) is result
        assert result.title == "Example"

    async def test_wrong_strategy_type(self, make_runner):
        runner = make_runner(HttpRunner)
        with pytest.raises(TypeError):
            await runner.run("http://example.com/", PdfStrategy())


class TestTeardown:
    async def test_teardown_fails_pending_checks(self, make_runner):
        """Checks still waiting on teardown fail instead of hanging."""
        runner = make_runner(ScriptedRunner)
        runner.block = True

        task = asyncio.create_task(runner.run("http://example.com/", STRATEGY))
        await asyncio.sleep(0.05)
        await runner.teardown()

        result = await asyncio.wait_for(task, timeout=1)
        assert isinstance(result.error, RunnerTornDownError)
        assert len(runner.pending) == 0
        assert runner.crawler.state is CrawlerState.STOPPED

    async def test_teardown_fails_checks_when_engine_close_fails(self, make_runner, monkeypatch):
        """Waiting checks are failed even if the engine cannot close."""
        runner = make_runner(ScriptedRunner)
        waiting, _ = runner.pending.acquire("http://example.com/")

        async def crash():
            raise RuntimeError("close failed")

        monkeypatch.setattr(runner.crawler, "_close", crash)

        with pytest.raises(RuntimeError):
            await runner.teardown()

        assert isinstance(waiting.result().error, RunnerTornDownError)
        assert len(runner.pending) == 0

    async def test_teardown_without_checks(self, make_runner):
        runner = make_runner(ScriptedRunner)

        await runner.teardown()
        await runner.teardown()

        assert runner.crawler.state is CrawlerState.STOPPED

    async def test_run_after_teardown(self, make_runner):
        """A torn down runner answers with a failure."""
        runner = make_runner(ScriptedRunner)
        await runner.teardown()

        result = await runner.run("http://example.com/", STRATEGY)

        assert isinstance(result.error, CrawlerStoppedError)
        assert runner.calls == []

    async def test_engine_options_override(self, make_runner):
        """Keyword arguments override the engine settings."""
        runner = make_runner(ScriptedRunner, max_concurrency=7)
        assert runner.crawler.max_concurrency == 7
        assert runner.crawler.keep_alive is True
        assert runner.crawler.retry_on_blocked is True
