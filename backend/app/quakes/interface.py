"""Abstract interface for earthquake snapshot sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import QuakeRecord


class QuakeSource(ABC):
    """Contract for bulletin providers.

    A source only retrieves and parses. It never touches the SnapshotCache;
    callers decide what to do with the result.

    Lifecycle:
        source = PhivolcsFetcher(url)
        records = await source.fetch_snapshot()
        # ... app runs ...
        await source.aclose()
    """

    @abstractmethod
    async def fetch_snapshot(self, max_attempts: int | None = None) -> list[QuakeRecord]:
        """Return a non-empty list of records in bulletin order.

        Retries internally up to ``max_attempts`` total attempts (the source's
        default when None). Raises FetchError once every attempt has failed.
        """

    async def aclose(self) -> None:
        """Release network resources. Safe to call multiple times."""
