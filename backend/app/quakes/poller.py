"""Background poller that keeps the bulletin cache warm."""

from __future__ import annotations

import asyncio
import logging

from .cache import SnapshotCache
from .errors import FetchError

logger = logging.getLogger(__name__)


class QuakePoller:
    """Periodically refresh the SnapshotCache, independent of inbound requests.

    Every successful refresh flows through the cache's refresh listener into
    the ChangeDetector, which decides what to broadcast. ``latest_id`` only
    feeds the log line saying whether the top of the bulletin moved.
    """

    def __init__(self, cache: SnapshotCache, poll_interval: float = 20.0) -> None:
        self._cache = cache
        self._interval = poll_interval
        self._task: asyncio.Task | None = None
        self.latest_id: str | None = None

    async def start(self) -> None:
        """Spawn the polling task. Warm-up runs inside it, so startup never waits on the network."""
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self._run(), name="quake-poller")
        logger.info("Quake poller started: %.1fs interval", self._interval)

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Quake poller stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # --- Internal ---

    async def _run(self) -> None:
        await self._warm_up()
        while True:
            await asyncio.sleep(self._interval)
            await self.poll_once()

    async def _warm_up(self) -> None:
        """Initial fetch so the first query or subscriber finds data."""
        logger.info("Initial PHIVOLCS fetch...")
        try:
            records = await self._cache.refresh()
        except Exception as e:
            logger.warning("Failed to load initial bulletin: %s", e)
            return
        self.latest_id = records[0].id if records else None
        logger.info("Loaded %d earthquake entries", len(records))

    async def poll_once(self) -> None:
        """Execute one poll cycle. Never raises."""
        try:
            records = await self._cache.refresh()
        except FetchError as e:
            logger.warning("Poll failed: %s", e)
            return
        except Exception:
            logger.exception("Poll cycle crashed")
            return

        if not records:
            return
        latest = records[0]
        if latest.id != self.latest_id:
            logger.info("New earthquake detected: %s (M%.1f)", latest.location, latest.magnitude)
            self.latest_id = latest.id
        else:
            logger.debug("No new earthquakes yet")
