"""
Admission gate for registry submissions.

The gate is a capped counting permit pool. It starts full, callers take one
permit per submission and give it back afterwards, and a background drip
returns one permit every ``time_unit / request_limit`` seconds. Every return
path is capped at ``request_limit``, so admissions are spread across the
window instead of landing as one burst per window.
"""

import asyncio
import time
from collections import deque
from typing import Deque, Optional

from shared.config import ClientConfig
from shared.errors import InvalidConfigurationError
from shared.logging import get_logger
from shared.metrics import SubmissionMetrics


class RateGate:
    """Capped permit pool refilled by a fixed-rate drip task."""

    def __init__(
        self,
        time_unit: float = 1.0,
        request_limit: int = 5,
        name: str = "registry",
        metrics: Optional[SubmissionMetrics] = None
    ):
        self.logger = get_logger("commissioning.rate_gate")

        if isinstance(request_limit, bool) or not isinstance(request_limit, int) or request_limit <= 0:
            self.logger.error("Request limit must be a positive integer", request_limit=request_limit)
            raise InvalidConfigurationError(
                f"request_limit must be a positive integer, got {request_limit!r}",
                details={"request_limit": request_limit}
            )
        if time_unit <= 0:
            self.logger.error("Time unit must be positive", time_unit=time_unit)
            raise InvalidConfigurationError(
                f"time_unit must be positive, got {time_unit!r}",
                details={"time_unit": time_unit}
            )

        self.time_unit = float(time_unit)
        self.request_limit = request_limit
        self.interval = self.time_unit / request_limit
        self.name = name
        self.metrics = metrics

        self._permits = request_limit
        self._waiters: Deque[asyncio.Future] = deque()

        # Drip task
        self._drip_task: Optional[asyncio.Task] = None
        self._stopped = False
        self.running = False

        self._update_gauge()

    @classmethod
    def from_config(cls, config: ClientConfig, metrics: Optional[SubmissionMetrics] = None) -> "RateGate":
        """Build a gate from client configuration."""
        return cls(config.time_unit_seconds, config.request_limit, metrics=metrics)

    @property
    def available_permits(self) -> int:
        return self._permits

    @property
    def waiting(self) -> int:
        """Number of callers currently suspended in ``acquire``."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def start(self):
        """Start the drip task."""
        if self._drip_alive():
            return
        self._stopped = False
        self._start_drip()
        self.logger.info(
            "Rate gate started",
            gate=self.name,
            request_limit=self.request_limit,
            interval_seconds=self.interval
        )

    async def stop(self):
        """Stop the drip task. Outstanding permits stay usable."""
        self._stopped = True
        self.running = False
        if self._drip_task:
            self._drip_task.cancel()
            try:
                await self._drip_task
            except asyncio.CancelledError:
                pass
            self._drip_task = None

        self.logger.info("Rate gate stopped", gate=self.name, available_permits=self._permits)

    async def __aenter__(self) -> "RateGate":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def acquire(self):
        """Wait for a permit and consume it.

        Cancellation while waiting leaves the pool untouched. No ordering is
        promised among waiters.
        """
        if not self._stopped and not self._drip_alive():
            self._start_drip()

        started = time.monotonic()
        loop = asyncio.get_running_loop()
        while self._permits <= 0:
            waiter = loop.create_future()
            self._waiters.append(waiter)
            try:
                await waiter
            except asyncio.CancelledError:
                # Woken, then cancelled before resuming: hand the wake-up on
                if waiter.done() and not waiter.cancelled():
                    self._wake_next()
                raise
            finally:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)

        self._permits -= 1
        self._update_gauge()

        waited = time.monotonic() - started
        if self.metrics:
            self.metrics.observe_histogram("rate_gate_wait_seconds", waited, gate=self.name)
        self.logger.debug(
            "Permit acquired",
            gate=self.name,
            waited_seconds=round(waited, 4),
            available_permits=self._permits
        )

    def release(self) -> bool:
        """Return one permit. A release at full capacity is ignored."""
        released = self._release_capped()
        if not released:
            self.logger.debug("Release ignored, gate at capacity", gate=self.name)
        return released

    def _release_capped(self) -> bool:
        if self._permits >= self.request_limit:
            return False
        self._permits += 1
        self._wake_next()
        self._update_gauge()
        return True

    def _wake_next(self):
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

    def _drip_alive(self) -> bool:
        # A task left behind by a closed event loop is done and must be replaced
        return self._drip_task is not None and not self._drip_task.done()

    def _start_drip(self):
        self.running = True
        self._drip_task = asyncio.get_running_loop().create_task(self._drip_loop())

    async def _drip_loop(self):
        """Release one capped permit per interval on a fixed-rate schedule."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.interval
        while self.running:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            next_tick += self.interval
            self._release_capped()

    def _update_gauge(self):
        if self.metrics:
            self.metrics.set_gauge("rate_gate_available_permits", self._permits, gate=self.name)
