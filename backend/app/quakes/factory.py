"""Factory that wires the earthquake relay components together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .broadcaster import ChangeDetector
from .cache import SnapshotCache
from .config import QuakeSettings
from .fetcher import PhivolcsFetcher
from .interface import QuakeSource
from .poller import QuakePoller
from .query import QueryService
from .registry import SubscriberRegistry

logger = logging.getLogger(__name__)


@dataclass
class QuakeService:
    """Owns every stateful component for one process.

    Lifecycle:
        service = create_quake_service(settings)
        await service.start()   # spawns the poller; warm-up runs in the background
        # ... app runs ...
        await service.stop()
    """

    settings: QuakeSettings
    source: QuakeSource
    registry: SubscriberRegistry
    detector: ChangeDetector
    cache: SnapshotCache
    query: QueryService
    poller: QuakePoller

    async def start(self) -> None:
        await self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()
        await self.source.aclose()


def create_quake_service(
    settings: QuakeSettings | None = None,
    source: QuakeSource | None = None,
) -> QuakeService:
    """Build an unstarted QuakeService.

    - ``settings`` None → read from the environment
    - ``source`` None → PhivolcsFetcher configured from settings

    Caller must await service.start().
    """
    settings = settings or QuakeSettings.from_env()
    if source is None:
        source = PhivolcsFetcher(
            url=settings.source_url,
            timeout=settings.fetch_timeout,
            max_attempts=settings.max_attempts,
            retry_delay=settings.retry_delay,
        )
        logger.info("Quake source: PHIVOLCS bulletin at %s", settings.source_url)

    registry = SubscriberRegistry()
    detector = ChangeDetector(registry)
    cache = SnapshotCache(source, ttl=settings.cache_ttl, on_refresh=detector.ingest)
    return QuakeService(
        settings=settings,
        source=source,
        registry=registry,
        detector=detector,
        cache=cache,
        query=QueryService(cache),
        poller=QuakePoller(cache, poll_interval=settings.poll_interval),
    )
