"""On-demand bulletin queries with optional time-range filtering."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from .cache import SnapshotCache
from .errors import FetchError, UpstreamUnavailable
from .models import QuakeRecord

logger = logging.getLogger(__name__)


def filter_by_time(
    records: Iterable[QuakeRecord],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[QuakeRecord]:
    """Keep records whose origin time lies in ``[start, end]`` (both inclusive).

    Records with an unparseable time are dropped. Bounds must be timezone-aware.
    """
    kept: list[QuakeRecord] = []
    for record in records:
        when = record.parsed_time
        if when is None:
            continue
        if start is not None and when < start:
            continue
        if end is not None and when > end:
            continue
        kept.append(record)
    return kept


class QueryService:
    """Answer pull requests from the SnapshotCache."""

    def __init__(self, cache: SnapshotCache) -> None:
        self._cache = cache

    async def query(
        self,
        force_refresh: bool = False,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[QuakeRecord]:
        """Current bulletin, filtered when a bound is given.

        Raises UpstreamUnavailable only when the fetch failed and nothing was
        ever cached.
        """
        try:
            records = await self._cache.get_or_refresh(force=force_refresh)
        except FetchError as e:
            logger.error("Bulletin query failed with no cache: %s", e)
            raise UpstreamUnavailable("PHIVOLCS bulletin unavailable and no cached copy") from e

        if start is None and end is None:
            return records
        return filter_by_time(records, start, end)
