from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Protocol

from loguru import logger

from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.models import MetadataResult

RESOLUTION_QUEUE_INTERVAL_SECONDS = 0.1


class Resolver(Protocol):
    async def resolve(self, url: str) -> MetadataResult: ...


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class SerialResolutionQueue:
    """
    Runs metadata resolutions one at a time, in arrival order, with a short pause
    after each task.

    Used for on-demand price refreshes so that a burst of card refreshes does not
    turn into a burst of requests against the same shop. Errors from one task are
    re-raised to its caller and do not stall the queue.
    """

    def __init__(
        self,
        resolver: Resolver,
        *,
        interval_seconds: float = RESOLUTION_QUEUE_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._resolver = resolver
        self._interval_seconds = max(0.0, float(interval_seconds))
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._waiting = 0

    @property
    def pending(self) -> int:
        return self._waiting

    async def resolve(self, url: str) -> MetadataResult:
        self._waiting += 1
        _log("resolution_queued", url=url, pending=self._waiting)
        try:
            await self._lock.acquire()
        finally:
            self._waiting -= 1

        try:
            return await self._resolver.resolve(url)
        finally:
            try:
                if self._interval_seconds:
                    await self._sleep(self._interval_seconds)
            finally:
                self._lock.release()
