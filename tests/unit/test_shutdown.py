"""Tests for graceful shutdown request tracking."""

import asyncio

import pytest

from src.rosterhub.core.shutdown import RequestTracker

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


class TestRequestTracker:
    async def test_request_tracking(self):
        tracker = RequestTracker()
        assert tracker.in_flight_count == 0

        async with tracker.track_request():
            assert tracker.in_flight_count == 1

        assert tracker.in_flight_count == 0

    async def test_shutdown_with_no_requests_drains_immediately(self):
        tracker = RequestTracker()
        tracker.start_shutdown()

        assert tracker.is_shutting_down
        assert await tracker.wait_for_drain(timeout=1.0) is True

    async def test_shutdown_waits_for_in_flight_requests(self):
        tracker = RequestTracker()
        release = asyncio.Event()

        async def request() -> None:
            async with tracker.track_request():
                await release.wait()

        task = asyncio.create_task(request())
        await asyncio.sleep(0)
        tracker.start_shutdown()

        drain = asyncio.create_task(tracker.wait_for_drain(timeout=2.0))
        await asyncio.sleep(0.05)
        assert not drain.done()

        release.set()
        await task
        assert await drain is True

    async def test_drain_timeout(self):
        tracker = RequestTracker()
        release = asyncio.Event()

        async def request() -> None:
            async with tracker.track_request():
                await release.wait()

        task = asyncio.create_task(request())
        await asyncio.sleep(0)
        tracker.start_shutdown()

        assert await tracker.wait_for_drain(timeout=0.05) is False
        release.set()
        await task

    async def test_reset(self):
        tracker = RequestTracker()
        tracker.start_shutdown()
        tracker.reset()
        assert not tracker.is_shutting_down
        assert tracker.in_flight_count == 0
