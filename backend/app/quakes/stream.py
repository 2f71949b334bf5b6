"""SSE streaming endpoint for newly detected earthquakes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .registry import RETRY_FRAME, SubscriberRegistry

logger = logging.getLogger(__name__)


def create_stream_router(registry: SubscriberRegistry, keepalive_interval: float = 30.0) -> APIRouter:
    """Create the SSE streaming router bound to a subscriber registry."""
    router = APIRouter(prefix="/api/earthquakes", tags=["streaming"])

    @router.get("/stream")
    async def stream_earthquakes(request: Request) -> StreamingResponse:
        """SSE endpoint for new earthquakes.

        Each newly listed earthquake arrives as one event:

            data: {"id": "...", "time": "...", "lat": 14.5, ...}

        Nothing is replayed on connect. A ``:heartbeat`` comment is sent while
        idle so proxies do not drop the connection.
        """
        return StreamingResponse(
            _generate_events(registry, request, keepalive_interval),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


async def _generate_events(
    registry: SubscriberRegistry,
    request: Request,
    keepalive_interval: float = 30.0,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE frames for one subscriber.

    Registers on entry and always deregisters on exit, whether the client
    disconnected, the task was cancelled, or the generator was closed.
    """
    # Tell the client to retry after 1 second if the connection drops
    yield RETRY_FRAME

    client_ip = request.client.host if request.client else "unknown"
    subscriber = registry.subscribe(client=client_ip)

    try:
        while True:
            if await request.is_disconnected():
                break
            yield await subscriber.next_frame(keepalive_interval)
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
        raise
    finally:
        registry.unsubscribe(subscriber)
