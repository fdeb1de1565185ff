"""In-flight request tracking so shutdown can drain before disposing the engine."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.rosterhub.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        # Single event loop: plain counter updates need no lock.
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0 and self._shutting_down:
                self._drained.set()

    def start_shutdown(self) -> None:
        """Stop accepting new work and arm the drain event."""
        self._shutting_down = True
        logger.info("Shutdown started", in_flight=self._in_flight)
        if self._in_flight == 0:
            self._drained.set()

    async def wait_for_drain(self, timeout: float) -> bool:
        """Wait until in-flight requests finish. Returns False on timeout."""
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "Shutdown drain timed out",
                timeout_seconds=timeout,
                in_flight=self._in_flight,
            )
            return False
        logger.info("All requests drained")
        return True

    def reset(self) -> None:
        """Reset tracker state. For testing only."""
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()


request_tracker = RequestTracker()
