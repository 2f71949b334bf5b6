"""Tests for the SSE event generator and router."""

import asyncio
from types import SimpleNamespace

import pytest

from app.quakes.registry import KEEPALIVE_FRAME, RETRY_FRAME, SubscriberRegistry, format_event
from app.quakes.stream import _generate_events, create_stream_router


class FakeRequest:
    """Minimal stand-in for starlette's Request."""

    def __init__(self, host: str = "127.0.0.1") -> None:
        self.client = SimpleNamespace(host=host)
        self.disconnected = False

    async def is_disconnected(self) -> bool:
        return self.disconnected


@pytest.mark.asyncio
class TestGenerateEvents:
    """Tests for the per-connection SSE generator."""

    async def test_first_frame_is_retry_directive(self):
        registry = SubscriberRegistry()
        gen = _generate_events(registry, FakeRequest())

        assert await gen.__anext__() == RETRY_FRAME
        await gen.aclose()

    async def test_registers_and_receives_broadcast(self):
        registry = SubscriberRegistry()
        gen = _generate_events(registry, FakeRequest(), keepalive_interval=5.0)
        await gen.__anext__()

        next_frame = asyncio.create_task(gen.__anext__())
        await asyncio.sleep(0.01)
        assert len(registry) == 1

        frame = format_event({"id": "A"})
        registry.broadcast(frame)
        assert await next_frame == frame

        await gen.aclose()

    async def test_keepalive_while_idle(self):
        registry = SubscriberRegistry()
        gen = _generate_events(registry, FakeRequest(), keepalive_interval=0.01)
        await gen.__anext__()

        assert await gen.__anext__() == KEEPALIVE_FRAME
        await gen.aclose()

    async def test_no_replay_on_connect(self):
        """Events broadcast before a client connects are never sent to it."""
        registry = SubscriberRegistry()
        registry.broadcast(format_event({"id": "old"}))
        gen = _generate_events(registry, FakeRequest(), keepalive_interval=0.01)
        await gen.__anext__()

        assert await gen.__anext__() == KEEPALIVE_FRAME
        await gen.aclose()

    async def test_close_unsubscribes(self):
        registry = SubscriberRegistry()
        gen = _generate_events(registry, FakeRequest(), keepalive_interval=0.01)
        await gen.__anext__()
        await gen.__anext__()
        assert len(registry) == 1

        await gen.aclose()

        assert len(registry) == 0

    async def test_disconnect_ends_stream(self):
        registry = SubscriberRegistry()
        request = FakeRequest()
        gen = _generate_events(registry, request, keepalive_interval=0.01)
        await gen.__anext__()
        await gen.__anext__()

        request.disconnected = True
        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        assert len(registry) == 0

    async def test_cancel_unsubscribes(self):
        registry = SubscriberRegistry()
        gen = _generate_events(registry, FakeRequest(), keepalive_interval=5.0)
        await gen.__anext__()

        pending = asyncio.create_task(gen.__anext__())
        await asyncio.sleep(0.01)
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

        assert len(registry) == 0


class TestStreamRouter:
    def test_route_registered(self):
        router = create_stream_router(SubscriberRegistry())
        assert "/api/earthquakes/stream" in {route.path for route in router.routes}
