"""Interval polling of a swap route with loading/error state."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog

from ..core.types import SwapRequest, SwapResult
from ..service.fetch import FetchSwapRouteConfig, fetch_swap_route

logger = structlog.get_logger(__name__)

RouteFetcher = Callable[[SwapRequest], Awaitable[SwapResult]]


class RoutePoller:
    """Keeps a swap route fresh for a UI or bot loop."""

    def __init__(
        self,
        request: SwapRequest,
        fetch: RouteFetcher | None = None,
        config: FetchSwapRouteConfig | None = None,
        interval_seconds: float = 10.0,
    ) -> None:
        """Initialize the poller.

        Args:
            request: Request refreshed on every cycle
            fetch: Route fetcher, defaults to ``fetch_swap_route`` with ``config``
            config: Config for the default fetcher
            interval_seconds: Sleep between refreshes
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.request = request
        self._fetch = fetch or (lambda req: fetch_swap_route(req, config))
        self.interval_seconds = interval_seconds

        self.loading = False
        self.error: str | None = None
        self.result: SwapResult | None = None
        self.last_updated: datetime | None = None
        self.running = False

    def update_request(self, request: SwapRequest) -> None:
        """Swap the request; the current result no longer applies."""
        self.request = request
        self.result = None
        self.error = None

    async def refresh(self) -> SwapResult | None:
        """Run one fetch; errors are recorded, not raised."""
        self.loading = True
        try:
            self.result = await self._fetch(self.request)
            self.error = None
            self.last_updated = datetime.now(UTC)
        except Exception as e:
            logger.warning("Route refresh failed", error=str(e))
            self.error = str(e) or "Unknown error"
            self.result = None
        finally:
            self.loading = False
        return self.result

    async def run_forever(self) -> None:
        """Refresh until ``stop()`` is called or the task is cancelled."""
        logger.info("Starting route poller", interval_seconds=self.interval_seconds)
        self.running = True
        cycles = 0
        try:
            while self.running:
                await self.refresh()
                cycles += 1
                if not self.running:
                    break
                await asyncio.sleep(self.interval_seconds)
        except asyncio.CancelledError:
            logger.info("Route poller cancelled")
        finally:
            self.running = False
            logger.info("Route poller stopped", cycles=cycles)

    def stop(self) -> None:
        self.running = False
