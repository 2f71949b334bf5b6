"""Tests for QuakePoller."""

import asyncio

import pytest

from app.quakes.broadcaster import ChangeDetector
from app.quakes.cache import SnapshotCache
from app.quakes.errors import FetchError
from app.quakes.poller import QuakePoller
from app.quakes.registry import SubscriberRegistry


def _wire(source):
    registry = SubscriberRegistry()
    detector = ChangeDetector(registry)
    cache = SnapshotCache(source, on_refresh=detector.ingest)
    return registry, detector, cache


@pytest.mark.asyncio
class TestQuakePoller:
    """Unit tests for the background refresh loop."""

    async def test_poll_once_refreshes_cache(self, make_source, make_record):
        source = make_source([make_record("A")])
        _, _, cache = _wire(source)
        poller = QuakePoller(cache, poll_interval=60.0)

        await poller.poll_once()

        assert [r.id for r in cache.snapshot()] == ["A"]
        assert poller.latest_id == "A"

    async def test_poll_failure_does_not_raise(self, make_source):
        """A failed cycle is logged and swallowed."""
        _, _, cache = _wire(make_source(FetchError("down", attempts=3)))
        poller = QuakePoller(cache, poll_interval=60.0)

        await poller.poll_once()  # Should not raise

        assert cache.snapshot() is None

    async def test_unexpected_error_does_not_raise(self, make_source):
        _, _, cache = _wire(make_source(RuntimeError("bug")))
        poller = QuakePoller(cache, poll_interval=60.0)

        await poller.poll_once()  # Should not raise

    async def test_poll_broadcasts_new_records(self, make_source, make_record):
        source = make_source(
            [make_record("A")],
            [make_record("B"), make_record("A")],
        )
        registry, _, cache = _wire(source)
        subscriber = registry.subscribe()
        poller = QuakePoller(cache, poll_interval=60.0)

        await poller.poll_once()  # First snapshot adopted silently
        assert subscriber.pending == 0

        await poller.poll_once()
        assert subscriber.pending == 1
        assert poller.latest_id == "B"

    async def test_start_warms_cache(self, make_source, make_record):
        """Test that start() performs the initial fetch without waiting for the interval."""
        source = make_source([make_record("A")])
        _, _, cache = _wire(source)
        poller = QuakePoller(cache, poll_interval=60.0)

        await poller.start()
        await asyncio.sleep(0.05)

        assert [r.id for r in cache.snapshot()] == ["A"]
        assert poller.latest_id == "A"

        await poller.stop()

    async def test_warm_up_failure_keeps_polling(self, make_source, make_record):
        """Startup fetch failure is logged and the loop still fills the cache later."""
        source = make_source(FetchError("down"), [make_record("A")])
        _, _, cache = _wire(source)
        poller = QuakePoller(cache, poll_interval=0.01)

        await poller.start()
        await asyncio.sleep(0.1)

        assert poller.running
        assert cache.snapshot() is not None
        assert source.calls >= 2

        await poller.stop()

    async def test_loop_survives_repeated_failures(self, make_source):
        source = make_source(FetchError("down"))
        _, _, cache = _wire(source)
        poller = QuakePoller(cache, poll_interval=0.01)

        await poller.start()
        await asyncio.sleep(0.1)

        assert poller.running
        assert source.calls > 2

        await poller.stop()

    async def test_stop_cancels_task(self, make_source, make_record):
        _, _, cache = _wire(make_source([make_record("A")]))
        poller = QuakePoller(cache, poll_interval=10.0)

        await poller.start()
        assert poller.running

        await poller.stop()
        assert not poller.running
        assert poller._task is None

    async def test_stop_is_idempotent(self, make_source):
        _, _, cache = _wire(make_source([]))
        poller = QuakePoller(cache)

        await poller.stop()
        await poller.stop()  # Should not raise

    async def test_start_twice_keeps_one_task(self, make_source, make_record):
        _, _, cache = _wire(make_source([make_record("A")]))
        poller = QuakePoller(cache, poll_interval=10.0)

        await poller.start()
        task = poller._task
        await poller.start()

        assert poller._task is task
        await poller.stop()
