"""TTL snapshot cache for the earthquake bulletin."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from .errors import FetchError
from .interface import QuakeSource
from .models import QuakeRecord

logger = logging.getLogger(__name__)

RefreshListener = Callable[[list[QuakeRecord]], object]


class SnapshotCache:
    """In-memory cache of the latest successfully fetched bulletin.

    Writers: QuakePoller (every poll) and QueryService (on TTL miss or forced refresh).
    Readers: QueryService.

    The snapshot and its fetch time live in one tuple that is swapped in a
    single assignment, so readers never see a records/timestamp mismatch.
    Refreshes are serialized by a lock; a non-forced caller that queued behind
    another refresh reuses its result instead of fetching again. Forced
    refreshes always fetch.
    """

    def __init__(
        self,
        source: QuakeSource,
        ttl: float = 60.0,
        on_refresh: RefreshListener | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl
        self._on_refresh = on_refresh
        self._clock = clock
        self._state: tuple[list[QuakeRecord], float] | None = None
        self._lock = asyncio.Lock()

    async def get_or_refresh(self, force: bool = False) -> list[QuakeRecord]:
        """Return the cached snapshot if fresh, otherwise fetch a new one.

        If the fetch fails and any snapshot was ever cached, the stale snapshot
        is returned. FetchError propagates only when nothing is cached.
        """
        if not force and self.is_fresh():
            logger.debug("Serving cached bulletin (age %.1fs)", self.age())
            return self.snapshot()

        async with self._lock:
            if not force and self.is_fresh():
                return self.snapshot()
            try:
                return await self._refresh_locked()
            except FetchError as e:
                stale = self.snapshot()
                if stale is None:
                    raise
                logger.warning("Fetch failed, serving cached bulletin (age %.1fs): %s", self.age(), e)
                return stale

    async def refresh(self) -> list[QuakeRecord]:
        """Fetch and commit a new snapshot unconditionally.

        Any source failure is raised as FetchError.
        """
        async with self._lock:
            return await self._refresh_locked()

    def snapshot(self) -> list[QuakeRecord] | None:
        """Copy of the cached records, or None before the first successful fetch."""
        state = self._state
        return list(state[0]) if state else None

    @property
    def fetched_at(self) -> float | None:
        """Clock reading of the last successful fetch."""
        state = self._state
        return state[1] if state else None

    def age(self) -> float | None:
        fetched_at = self.fetched_at
        return None if fetched_at is None else self._clock() - fetched_at

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self._ttl

    def __len__(self) -> int:
        state = self._state
        return len(state[0]) if state else 0

    async def _refresh_locked(self) -> list[QuakeRecord]:
        try:
            records = await self._source.fetch_snapshot()
        except FetchError:
            raise
        except Exception as e:
            # Sources other than PhivolcsFetcher may raise anything.
            raise FetchError(f"Quake source failed: {e!r}", cause=e) from e
        self._state = (list(records), self._clock())
        logger.info("Cached %d bulletin rows", len(records))
        if self._on_refresh is not None:
            self._on_refresh(list(records))
        return list(records)
