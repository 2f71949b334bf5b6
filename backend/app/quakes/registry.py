"""Registry of connected SSE subscribers and event framing."""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from threading import Lock

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ":heartbeat\n\n"
RETRY_FRAME = "retry: 1000\n\n"


def format_event(payload: dict) -> str:
    """Frame a payload as a single SSE ``data:`` event."""
    return f"data: {json.dumps(payload)}\n\n"


class Subscriber:
    """One open event-stream connection.

    Holds a bounded queue of framed text. Delivery never blocks: when the
    queue is full the frame is dropped for this subscriber only.
    """

    _ids = itertools.count(1)

    def __init__(self, client: str = "unknown", max_pending: int = 100) -> None:
        self.id = next(self._ids)
        self.client = client
        self.closed = False
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)

    def deliver(self, frame: str) -> bool:
        """Queue a frame. Returns False if the subscriber is closed or backed up."""
        if self.closed:
            return False
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            logger.warning("Dropping event for slow subscriber #%d (%s)", self.id, self.client)
            return False
        return True

    async def next_frame(self, timeout: float) -> str:
        """Wait for the next queued frame, or return a keep-alive frame after ``timeout``."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return KEEPALIVE_FRAME

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def __repr__(self) -> str:
        return f"Subscriber(id={self.id}, client={self.client!r}, closed={self.closed})"


class SubscriberRegistry:
    """Thread-safe set of live subscribers.

    Broadcast iterates over a copy of the membership, so subscribers that
    connect or disconnect mid-broadcast never disturb delivery to the others.
    """

    def __init__(self, max_pending: int = 100) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = Lock()
        self._max_pending = max_pending

    def subscribe(self, client: str = "unknown") -> Subscriber:
        subscriber = Subscriber(client=client, max_pending=self._max_pending)
        with self._lock:
            self._subscribers.append(subscriber)
            total = len(self._subscribers)
        logger.info("SSE client connected: %s (%d total)", client, total)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove a subscriber. No-op if it is already gone."""
        subscriber.closed = True
        with self._lock:
            if subscriber not in self._subscribers:
                return
            self._subscribers.remove(subscriber)
            remaining = len(self._subscribers)
        logger.info("SSE client disconnected: %s (%d remaining)", subscriber.client, remaining)

    def broadcast(self, frame: str) -> int:
        """Best-effort delivery of one frame to every live subscriber.

        Returns the number of subscribers that accepted the frame. Failures are
        logged per subscriber and never raised.
        """
        delivered = 0
        for subscriber in self.subscribers():
            try:
                if subscriber.deliver(frame):
                    delivered += 1
            except Exception as e:
                logger.warning("Delivery to subscriber #%d failed: %s", subscriber.id, e)
        return delivered

    def subscribers(self) -> list[Subscriber]:
        """Snapshot of current membership. Returns a shallow copy."""
        with self._lock:
            return list(self._subscribers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def __contains__(self, subscriber: Subscriber) -> bool:
        with self._lock:
            return subscriber in self._subscribers
