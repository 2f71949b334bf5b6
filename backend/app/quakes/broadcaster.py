"""Detect newly listed earthquakes and fan them out to subscribers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from threading import Lock

from .models import QuakeRecord
from .registry import SubscriberRegistry, format_event

logger = logging.getLogger(__name__)


class ChangeDetector:
    """Diff each new snapshot against the last one that produced a broadcast.

    The first snapshot is adopted silently so early subscribers are not flooded
    with the whole bulletin. After that, records whose id was not in the held
    snapshot are broadcast once each, in bulletin order, and the new snapshot
    becomes the held one.

    A snapshot with no new ids leaves the held state alone. A record whose
    fields change under the same id (e.g. a magnitude revision) is therefore
    neither re-broadcast nor adopted.
    """

    def __init__(self, registry: SubscriberRegistry) -> None:
        self._registry = registry
        self._held: list[QuakeRecord] | None = None
        self._lock = Lock()

    def ingest(self, records: Sequence[QuakeRecord]) -> list[QuakeRecord]:
        """Process a fetched snapshot. Returns the records that were broadcast."""
        with self._lock:
            if self._held is None:
                self._held = list(records)
                logger.info("Adopted initial bulletin of %d rows", len(self._held))
                return []

            seen = {record.id for record in self._held}
            new_events = [record for record in records if record.id not in seen]
            if not new_events:
                return []

            logger.info(
                "Broadcasting %d new earthquake(s) to %d subscriber(s)",
                len(new_events),
                len(self._registry),
            )
            for record in new_events:
                self._registry.broadcast(format_event(record.to_dict()))
            self._held = list(records)
            return new_events

    def held(self) -> list[QuakeRecord] | None:
        """Copy of the snapshot new records are compared against."""
        with self._lock:
            return list(self._held) if self._held is not None else None
