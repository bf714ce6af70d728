"""Single entry point for health checks across every strategy."""

import logging
from collections.abc import Mapping
from typing import Any

from .config import Credentials, HealthCheckSettings, settings as default_settings
from .results import HealthCheckResult
from .runners import RUNNERS, HealthCheckRunner
from .strategies import BaseStrategy, StrategyKind, parse_strategy

logger = logging.getLogger(__name__)


class HealthCheck:
    """Routes each check to the runner of its strategy kind.

    Runners are created on first use and shared by every later call, so
    concurrent checks of one URL are deduplicated by that runner. Always
    ``teardown()`` (or use ``async with``) to close browsers and clients.
    """

    def __init__(
        self,
        settings: HealthCheckSettings | None = None,
        credentials: Credentials | None = None,
    ):
        self.settings = settings or default_settings
        self.credentials = credentials
        self._runners: dict[StrategyKind, HealthCheckRunner] = {}

    def get_runner(self, kind: StrategyKind | str) -> HealthCheckRunner:
        kind = StrategyKind(kind)
        runner = self._runners.get(kind)
        if runner is None:
            logger.debug("Creating %s runner", kind.value)
            runner = RUNNERS[kind](settings=self.settings, credentials=self.credentials)
            self._runners[kind] = runner
        return runner

    async def run(
        self,
        url: str,
        strategy: BaseStrategy | Mapping[str, Any],
    ) -> HealthCheckResult:
        """Check ``url`` with ``strategy``, a strategy model or raw descriptor."""
        if not isinstance(strategy, BaseStrategy):
            strategy = parse_strategy(strategy)

        return await self.get_runner(strategy.kind).run(url, strategy)

    async def teardown(self):
        """Tear down every runner created so far.

        A runner failing to close is logged and does not stop the others.
        """
        runners, self._runners = self._runners, {}
        for kind, runner in runners.items():
            logger.debug("Tearing down %s runner", kind.value)
            try:
                await runner.teardown()
            except Exception:
                logger.exception("Teardown of %s runner failed", kind.value)

    async def __aenter__(self) -> "HealthCheck":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.teardown()
