"""
Background Tracking Worker
==========================

Runs the tracking simulator every ``TRACKING_INTERVAL_SECONDS`` (default 5 s)
while at least one trip is in motion.

Lifecycle
---------
* ``ensure_running`` is registered with the trip service and called whenever
  a trip may have started moving; it starts the loop if it is not running.
* The loop stops by itself as soon as no trip is in motion, and can be
  started again later.
* ``stop`` cancels the loop; the app calls it on shutdown so no tick runs
  against a torn-down store.

Concurrency safety
------------------
* **Redis distributed lock** around each tick when redis is configured, so
  only one process moves vehicles per interval.  If redis cannot be reached
  the tick runs unlocked (single-process mode) and a warning is logged.
* Per-trip locks inside ``TripService.tick`` serialize the tick with user
  intents on the same trip.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.infrastructure.locks import DistributedLock
from src.services.trip_service import TripService

logger = logging.getLogger(__name__)

LOCK_NAME = "tracking_simulator"


class TrackingWorker:
    def __init__(
        self,
        service: TripService,
        *,
        interval_seconds: float,
        redis_factory: Optional[Callable[[], Awaitable[aioredis.Redis]]] = None,
    ):
        self.service = service
        self.interval = interval_seconds
        self.redis_factory = redis_factory
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        service.add_motion_listener(self.ensure_running)

    # ── Public API ────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def ensure_running(self) -> None:
        if not self.running and self.service.has_trips_in_motion():
            self.start()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        logger.info("Tracking worker started (interval=%.1fs)", self.interval)

    async def stop(self) -> None:
        if self._stop_event:
            self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Tracking worker stopped")

    # ── Internals ─────────────────────────────────────────────────────

    async def _loop(self) -> None:
        assert self._stop_event is not None
        while not self._stop_event.is_set():
            # Wait for the interval or until stop is signalled
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
                break
            except asyncio.TimeoutError:
                pass

            if not self.service.has_trips_in_motion():
                logger.info("No trips in motion; tracking worker going idle")
                break
            try:
                await self.run_tracking_cycle()
            except Exception:
                logger.exception("Unhandled error in tracking cycle")

    async def run_tracking_cycle(self) -> int:
        """Execute one tick.  Returns the number of trips moved."""
        if self.redis_factory is None:
            return await self.service.tick()

        redis = await self.redis_factory()
        lock = DistributedLock(redis, LOCK_NAME, ttl_seconds=max(self.interval * 2, 10))
        try:
            acquired = await lock.acquire()
        except (RedisConnectionError, RedisTimeoutError, OSError):
            logger.warning("Redis unreachable - running tracking tick without lock")
            return await self.service.tick()
        if not acquired:
            logger.debug("Lock held by another worker - skipping tick")
            return 0
        try:
            moved = await self.service.tick()
            if moved:
                logger.debug("Tracking tick moved %d trips", moved)
            return moved
        finally:
            await lock.release()
